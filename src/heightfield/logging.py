"""Parquet logging of generation runs for later comparison."""

from dataclasses import asdict, dataclass
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq
import structlog

logger = structlog.get_logger()

GENERATIONS_FILE = "generations.parquet"

GENERATION_SCHEMA = pa.schema([
    ("generation_id", pa.int32()),
    ("timestamp_ms", pa.int64()),
    ("noise_type", pa.string()),
    ("preset", pa.string()),
    ("seed", pa.int64()),
    ("width", pa.int32()),
    ("height", pa.int32()),
    ("octaves", pa.int32()),
    ("duration_ms", pa.float64()),
    ("average_height", pa.float64()),
    ("height_variance", pa.float64()),
    ("peak_count", pa.int32()),
])


@dataclass(frozen=True)
class GenerationRecord:
    """One completed generation."""

    generation_id: int
    timestamp_ms: int
    noise_type: str
    preset: str
    seed: int
    width: int
    height: int
    octaves: int
    duration_ms: float
    average_height: float
    height_variance: float
    peak_count: int


class GenerationLogWriter:
    """Writes generation records to a Parquet file.

    Accumulates records in memory and writes them on flush or close.
    """

    def __init__(self, run_dir: Path, buffer_size: int = 50):
        """Initialize GenerationLogWriter.

        Args:
            run_dir: Directory to write the Parquet file to
            buffer_size: Number of records to buffer before writing
        """
        self.run_dir = run_dir
        self.buffer_size = buffer_size
        self._records: list[dict] = []

        # Track if the file has been written (for append mode)
        self._file_exists = False

    @property
    def path(self) -> Path:
        return self.run_dir / GENERATIONS_FILE

    def log_generation(self, record: GenerationRecord) -> None:
        """Buffer a generation record, flushing when the buffer is full."""
        self._records.append(asdict(record))

        if len(self._records) >= self.buffer_size:
            self.flush()

    def flush(self) -> None:
        """Write buffered records to the Parquet file."""
        if not self._records:
            return

        self.run_dir.mkdir(parents=True, exist_ok=True)
        table = pa.Table.from_pylist(self._records, schema=GENERATION_SCHEMA)

        if self._file_exists and self.path.exists():
            # Append by reading, concatenating, and rewriting
            existing = pq.read_table(self.path)
            table = pa.concat_tables([existing, table])

        pq.write_table(table, self.path)
        self._records.clear()
        self._file_exists = True
        logger.debug("generation_log_flushed", path=str(self.path))

    def close(self) -> None:
        """Flush remaining records."""
        self.flush()
        logger.info("generation_log_closed", path=str(self.path))
