"""Tests for the Parquet generation log."""

import pyarrow.parquet as pq

from heightfield.logging import GenerationLogWriter, GenerationRecord


def make_record(generation_id: int) -> GenerationRecord:
    return GenerationRecord(
        generation_id=generation_id,
        timestamp_ms=1_700_000_000_000 + generation_id,
        noise_type="PERLIN",
        preset="MOUNTAINS",
        seed=-12,
        width=64,
        height=48,
        octaves=4,
        duration_ms=3.5,
        average_height=0.4,
        height_variance=0.02,
        peak_count=3,
    )


class TestGenerationLogWriter:
    """Tests for GenerationLogWriter."""

    def test_close_writes_records(self, tmp_path) -> None:
        """Buffered records are written on close."""
        writer = GenerationLogWriter(tmp_path / "run")
        writer.log_generation(make_record(1))
        writer.log_generation(make_record(2))
        writer.close()

        table = pq.read_table(writer.path)
        assert table.num_rows == 2
        assert table.column("generation_id").to_pylist() == [1, 2]
        assert table.column("seed").to_pylist() == [-12, -12]

    def test_flushes_when_buffer_full(self, tmp_path) -> None:
        """Reaching buffer_size writes without an explicit flush."""
        writer = GenerationLogWriter(tmp_path, buffer_size=2)
        writer.log_generation(make_record(1))
        assert not writer.path.exists()
        writer.log_generation(make_record(2))
        assert pq.read_table(writer.path).num_rows == 2

    def test_appends_across_flushes(self, tmp_path) -> None:
        """Later flushes append to the existing file."""
        writer = GenerationLogWriter(tmp_path)
        writer.log_generation(make_record(1))
        writer.flush()
        writer.log_generation(make_record(2))
        writer.log_generation(make_record(3))
        writer.close()

        table = pq.read_table(writer.path)
        assert table.column("generation_id").to_pylist() == [1, 2, 3]

    def test_empty_close_writes_nothing(self, tmp_path) -> None:
        """Closing with no records creates no file."""
        writer = GenerationLogWriter(tmp_path / "run")
        writer.close()
        assert not writer.path.exists()
