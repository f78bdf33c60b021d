"""
Unit tests for the chunked generation driver.
"""

import asyncio

import pytest

from app.services.batch_driver import BatchProgress, chunk_rows, run_chunked_generation


class TestChunkRows:
    def test_even_and_remainder(self):
        assert list(chunk_rows(list(range(12)), 5)) == [[0, 1, 2, 3, 4], [5, 6, 7, 8, 9], [10, 11]]

    def test_empty(self):
        assert list(chunk_rows([], 5)) == []

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            list(chunk_rows([1], 0))


class TestBatchProgress:
    def test_summary_flags(self):
        progress = BatchProgress(total_chunks=2)
        progress.add({"generated": 0, "failed": 1, "errors": ['Row "A": boom']})
        assert not progress.succeeded
        assert progress.has_failures
        progress.add({"generated": 3, "failed": 0})
        assert progress.succeeded
        assert (progress.generated, progress.failed, progress.errors) == (3, 1, ['Row "A": boom'])


class TestRunChunkedGeneration:
    def test_sends_chunks_in_order_and_reports_progress(self):
        sent = []
        snapshots = []

        async def send_chunk(event_id, chunk):
            sent.append((event_id, [r["data"]["participantName"] for r in chunk]))
            failed = [r for r in chunk if r["data"]["participantName"] == "P6"]
            return {
                "success": True,
                "generated": len(chunk) - len(failed),
                "failed": len(failed),
                "errors": [f'Row "{r["data"]["participantName"]}": render failed' for r in failed],
            }

        rows = [{"data": {"participantName": f"P{i}"}, "isValid": True} for i in range(12)]
        progress = asyncio.run(run_chunked_generation(
            "event-1", rows, send_chunk, chunk_size=5,
            on_progress=lambda p: snapshots.append((p.current_chunk, p.total_chunks, p.generated)),
        ))

        assert [names for _, names in sent] == [
            ["P0", "P1", "P2", "P3", "P4"],
            ["P5", "P6", "P7", "P8", "P9"],
            ["P10", "P11"],
        ]
        assert all(event_id == "event-1" for event_id, _ in sent)
        assert snapshots == [(1, 3, 5), (2, 3, 9), (3, 3, 11)]
        assert progress.generated == 11
        assert progress.failed == 1
        assert progress.errors == ['Row "P6": render failed']

    def test_call_failure_stops_remaining_chunks(self):
        calls = []

        async def send_chunk(event_id, chunk):
            calls.append(len(chunk))
            if len(calls) == 2:
                raise RuntimeError("Event not found")
            return {"generated": len(chunk), "failed": 0, "errors": []}

        rows = [{"data": {}, "isValid": True}] * 12
        with pytest.raises(RuntimeError, match="Event not found"):
            asyncio.run(run_chunked_generation("event-1", rows, send_chunk, chunk_size=5))
        assert calls == [5, 5]

    def test_default_chunk_size(self):
        sizes = []

        async def send_chunk(event_id, chunk):
            sizes.append(len(chunk))
            return {"generated": len(chunk), "failed": 0}

        progress = asyncio.run(run_chunked_generation("event-1", [{}] * 7, send_chunk))
        assert sizes == [5, 2]
        assert progress.total_chunks == 2
        assert not progress.has_failures
