"""Tests for SyncOrchestrator task selection and pass reporting."""

from __future__ import annotations

import asyncio

import pytest

from intakeflow.core.exceptions import CacheError, UnknownSectionError
from intakeflow.models.sync import SyncReportStatus
from intakeflow.sync.orchestrator import SyncOrchestrator
from intakeflow.sync.registry import SECTION_KEYS, SectionSpec
from tests.fakes import MemorySnapshotProvider, MockSyncClient

APP_ID = "APP-7"

ABC_REGISTRY = (
    SectionSpec(key="a", label="A", endpoint="a"),
    SectionSpec(key="b", label="B", endpoint="b"),
    SectionSpec(key="c", label="C", endpoint="c"),
)


@pytest.fixture
def client():
    return MockSyncClient()


@pytest.fixture
def snapshots():
    return MemorySnapshotProvider()


@pytest.fixture
def abc(client, snapshots):
    return SyncOrchestrator(client=client, snapshots=snapshots, registry=ABC_REGISTRY)


class TestBuildTasks:
    def test_one_task_per_section_in_registry_order(self, abc):
        tasks = abc.build_tasks(APP_ID, {}, {})
        assert [t.section_key for t in tasks] == ["a", "b", "c"]
        assert not any(t.runnable for t in tasks)

    def test_documents_enabled_without_availability_entry(self, client, snapshots):
        orchestrator = SyncOrchestrator(client=client, snapshots=snapshots)
        tasks = {t.section_key: t for t in orchestrator.build_tasks(APP_ID, None, None)}
        assert set(tasks) == set(SECTION_KEYS)
        assert tasks["documents"].runnable
        assert not tasks["usi"].runnable

    def test_documents_can_be_disabled_explicitly(self, client, snapshots):
        orchestrator = SyncOrchestrator(client=client, snapshots=snapshots)
        tasks = {t.section_key: t for t in orchestrator.build_tasks(APP_ID, None, {"documents": False})}
        assert not tasks["documents"].enabled

    def test_only_literal_true_enables_a_section(self, abc):
        tasks = abc.build_tasks(APP_ID, {}, {"a": 1, "b": "yes", "c": True})
        assert [t.enabled for t in tasks] == [False, False, True]

    def test_up_to_date_from_metadata(self, abc):
        tasks = abc.build_tasks(APP_ID, {"a": {"uptodate": True}, "b": {"uptodate": False}}, {})
        assert [t.up_to_date for t in tasks] == [True, False, False]


class TestSyncAll:
    @pytest.mark.asyncio
    async def test_runs_only_available_stale_sections(self, abc, client, snapshots):
        metadata = {"a": {"uptodate": False}, "b": {"uptodate": True}}
        availability = {"a": True, "b": True, "c": False}

        report = await abc.sync_all(APP_ID, metadata, availability)

        assert client.calls == [(APP_ID, "a")]
        assert report.status is SyncReportStatus.SUCCESS
        assert report.attempted == ["a"]
        assert report.succeeded == ["a"]
        assert snapshots.invalidated == [APP_ID]

    @pytest.mark.asyncio
    async def test_failed_section_is_reported_and_cache_still_invalidated(self, abc, client, snapshots):
        client.fail_section("a", "Remote rejected", detail={"message": "Remote rejected"})
        metadata = {"a": {"uptodate": False}, "b": {"uptodate": True}}
        availability = {"a": True, "b": True, "c": False}

        report = await abc.sync_all(APP_ID, metadata, availability)

        assert client.synced_sections == ["a"]
        assert report.status is SyncReportStatus.PARTIAL_FAILURE
        assert report.failure_count == 1
        failure = report.failures[0]
        assert failure.section_key == "a"
        assert failure.label == "A"
        assert failure.message == "Remote rejected"
        assert failure.error == {"message": "Remote rejected"}
        assert report.message == "Failed to sync 1 section."
        assert snapshots.invalidated == [APP_ID]

    @pytest.mark.asyncio
    async def test_nothing_to_do_is_a_noop(self, abc, client, snapshots):
        metadata = {"a": {"uptodate": True}, "b": {"uptodate": True}}
        availability = {"a": True, "b": True, "c": False}

        report = await abc.sync_all(APP_ID, metadata, availability)

        assert client.calls == []
        assert report.status is SyncReportStatus.NOOP
        assert report.ok
        assert report.message == "Everything is already synced."
        assert snapshots.invalidated == [APP_ID]

    @pytest.mark.asyncio
    async def test_one_failure_does_not_stop_siblings(self, abc, client):
        client.fail_section("b")
        report = await abc.sync_all(APP_ID, {}, {"a": True, "b": True, "c": True})
        assert sorted(client.synced_sections) == ["a", "b", "c"]
        assert report.succeeded == ["a", "c"]
        assert [f.section_key for f in report.failures] == ["b"]

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_failure(self, snapshots):
        class BrokenClient:
            async def sync_section(self, application_id, section_key):
                raise RuntimeError("connection reset")

        orchestrator = SyncOrchestrator(client=BrokenClient(), snapshots=snapshots, registry=ABC_REGISTRY)
        report = await orchestrator.sync_all(APP_ID, {}, {"a": True})
        assert report.failures[0].message == "connection reset"
        assert snapshots.invalidated == [APP_ID]

    @pytest.mark.asyncio
    async def test_sections_run_concurrently(self, snapshots):
        client = MockSyncClient(delay=0.05)
        orchestrator = SyncOrchestrator(client=client, snapshots=snapshots, registry=ABC_REGISTRY)
        pass_task = asyncio.create_task(orchestrator.sync_all(APP_ID, {}, {"a": True, "b": True, "c": True}))
        await asyncio.sleep(0.01)
        assert orchestrator.is_pending
        assert len(client.calls) == 3
        report = await pass_task
        assert not orchestrator.is_pending
        assert len(report.succeeded) == 3


class TestSyncSection:
    @pytest.mark.asyncio
    async def test_ignores_availability_and_freshness(self, abc, client, snapshots):
        report = await abc.sync_section(APP_ID, "b")
        assert client.calls == [(APP_ID, "b")]
        assert report.status is SyncReportStatus.SUCCESS
        assert snapshots.invalidated == [APP_ID]

    @pytest.mark.asyncio
    async def test_failure_is_reported(self, abc, client, snapshots):
        client.fail_section("c", "Bad data")
        report = await abc.sync_section(APP_ID, "c")
        assert report.failure_count == 1
        assert report.failures[0].error == "Bad data"
        assert snapshots.invalidated == [APP_ID]

    @pytest.mark.asyncio
    async def test_unknown_section_raises_before_any_call(self, abc, client, snapshots):
        with pytest.raises(UnknownSectionError):
            await abc.sync_section(APP_ID, "nope")
        assert client.calls == []
        assert snapshots.invalidated == []


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancelled_section_propagates_and_still_invalidates(self, snapshots):
        class CancellingClient:
            async def sync_section(self, application_id, section_key):
                raise asyncio.CancelledError()

        orchestrator = SyncOrchestrator(client=CancellingClient(), snapshots=snapshots, registry=ABC_REGISTRY)
        with pytest.raises(asyncio.CancelledError):
            await orchestrator.sync_all(APP_ID, {}, {"a": True})
        assert snapshots.invalidated == [APP_ID]
        assert not orchestrator.is_pending


class TestInvalidationFailure:
    @pytest.mark.asyncio
    async def test_cache_error_does_not_replace_report(self, client):
        class DownSnapshots:
            def invalidate(self, application_id):
                raise CacheError("redis down")

        orchestrator = SyncOrchestrator(client=client, snapshots=DownSnapshots(), registry=ABC_REGISTRY)
        report = await orchestrator.sync_all(APP_ID, {}, {"a": True})
        assert report.status is SyncReportStatus.SUCCESS
        assert report.succeeded == ["a"]
        assert not orchestrator.is_pending
