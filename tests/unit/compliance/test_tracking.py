"""Unit tests for the tracking lookup."""

import asyncio
import pytest
from pydantic import ValidationError as PydanticValidationError

from compliance import NotFoundError, ValidationError, CollaboratorError
from compliance.seed import sample_status_records
from compliance.tracking import (
    ReportStatusSource,
    RepositoryStatusSource,
    StaticStatusSource,
    TrackingLookup,
    TrackingResult,
)
from models import ReportStatus


class RecordingSource(ReportStatusSource):
    """Counts calls so tests can tell whether a lookup happened."""

    def __init__(self, records):
        self.inner = StaticStatusSource(records)
        self.calls = []

    async def find(self, tracking_id):
        self.calls.append(tracking_id)
        return await self.inner.find(tracking_id)


class GatedSource(ReportStatusSource):
    """Each lookup waits until the test releases it."""

    def __init__(self, records):
        self.inner = StaticStatusSource(records)
        self.gates = {}

    async def find(self, tracking_id):
        gate = self.gates.setdefault(tracking_id, asyncio.Event())
        await gate.wait()
        return await self.inner.find(tracking_id)


@pytest.fixture
def source():
    return RecordingSource(sample_status_records())


def run(coro):
    return asyncio.run(coro)


class TestTrackingLookup:

    def test_found(self, source):
        record = run(TrackingLookup(source).track("WB-2023-002"))
        assert record.title == "Workplace Safety Concern"
        assert record.status == ReportStatus.INVESTIGATING

    def test_not_found(self, source):
        with pytest.raises(NotFoundError):
            run(TrackingLookup(source).track("WB-9999-ZZZZ"))

    def test_not_found_result(self, source):
        result = run(TrackingLookup(source).lookup("WB-9999-ZZZZ"))
        assert result.not_found
        assert result.record is None
        assert not result.found

    def test_input_trimmed(self, source):
        record = run(TrackingLookup(source).track("  WB-2023-001\n"))
        assert record.status == ReportStatus.PENDING
        assert source.calls == ["WB-2023-001"]

    def test_case_sensitive(self, source):
        with pytest.raises(NotFoundError):
            run(TrackingLookup(source).track("wb-2023-001"))

    @pytest.mark.parametrize("raw", ["", "   ", None])
    def test_blank_rejected_before_lookup(self, source, raw):
        with pytest.raises(ValidationError) as exc:
            run(TrackingLookup(source).lookup(raw))
        assert "tracking ID required" in exc.value.message
        assert source.calls == []

    def test_no_retry_after_not_found(self, source):
        lookup = TrackingLookup(source)
        run(lookup.lookup("missing"))
        assert source.calls == ["missing"]

    def test_latest_holds_last_result(self, source):
        lookup = TrackingLookup(source)
        run(lookup.lookup("WB-2023-001"))
        run(lookup.lookup("missing"))
        assert lookup.latest.tracking_id == "missing"
        assert lookup.latest.not_found

    def test_overlapping_lookups_last_started_wins(self):
        source = GatedSource(sample_status_records())
        lookup = TrackingLookup(source)

        async def scenario():
            first = asyncio.create_task(lookup.lookup("WB-2023-001"))
            await asyncio.sleep(0)
            second = asyncio.create_task(lookup.lookup("WB-2023-003"))
            await asyncio.sleep(0)
            # Later lookup finishes first, earlier one finishes last
            source.gates["WB-2023-003"].set()
            await second
            source.gates["WB-2023-001"].set()
            await first
            return first.result(), second.result()

        first, second = run(scenario())
        assert first.found and second.found
        assert lookup.latest is second

    def test_source_delay(self):
        source = StaticStatusSource(sample_status_records(), delay=0.01)
        assert run(TrackingLookup(source).track("WB-2023-003")).status == ReportStatus.RESOLVED


class TestTrackingResult:

    def test_needs_exactly_one_outcome(self):
        with pytest.raises(PydanticValidationError):
            TrackingResult(tracking_id="x")

    def test_unwrap_not_found(self):
        with pytest.raises(NotFoundError):
            TrackingResult(tracking_id="x", not_found=True).unwrap()


class TestRepositoryStatusSource:

    def test_wraps_io_failure(self):
        class BrokenReports:
            def get_by_tracking_id(self, tracking_id):
                raise OSError("disk gone")

        source = RepositoryStatusSource(BrokenReports())
        with pytest.raises(CollaboratorError):
            run(TrackingLookup(source).track("TRK-0000-0000"))

    def test_missing_report(self):
        class EmptyReports:
            def get_by_tracking_id(self, tracking_id):
                return None

        source = RepositoryStatusSource(EmptyReports())
        assert run(TrackingLookup(source).lookup("TRK-0000-0000")).not_found
