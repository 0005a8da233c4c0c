"""
JSON Writer Channel
Writes output records to a JSONL file, one record per line.
"""

import json
import logging
import os
from datetime import datetime
from typing import Any

from ..utils.constants import DEFAULT_JSON_DIR

logger = logging.getLogger(__name__)


class JsonlRecordWriter:
    """
    RecordChannel that appends record.to_dict() to a JSONL file.

    Example:
        with JsonlRecordWriter("data") as writer:
            writer.put(record)
    """

    def __init__(self, json_dir: str = DEFAULT_JSON_DIR, filename: str | None = None):
        """
        Open output file.

        Args:
            json_dir: Directory for the JSONL file (created if missing)
            filename: File name; defaults to records_YYYYMMDD_HHMMSS.jsonl
        """
        os.makedirs(json_dir, exist_ok=True)
        self.path = os.path.join(json_dir, filename or _generate_output_filename())
        self._file = open(self.path, "w", encoding="utf-8")
        self.record_count = 0
        self.counts_by_type: dict[str, int] = {}

        logger.info(f"JSON Writer started: {self.path}")

    def put(self, record: Any) -> None:
        """Serialize and append one record."""
        data = record.to_dict()
        record_type = data.get("record_type", type(record).__name__)

        self._file.write(json.dumps(data) + "\n")
        self._file.flush()

        self.record_count += 1
        self.counts_by_type[record_type] = self.counts_by_type.get(record_type, 0) + 1

    def close(self) -> None:
        if self._file.closed:
            return
        self._file.close()
        _log_final_summary(self.record_count, self.counts_by_type, self.path)

    def __enter__(self) -> "JsonlRecordWriter":
        return self

    def __exit__(self, *_exc) -> None:
        self.close()


def _generate_output_filename() -> str:
    """Generate timestamped output filename."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"records_{timestamp}.jsonl"


def _log_final_summary(record_count: int, counts_by_type: dict, path: str) -> None:
    """Log final summary of written records."""
    logger.info(f"JSON Writer complete: {record_count} records -> {path}")
    for record_type, count in sorted(counts_by_type.items()):
        logger.info(f"  {record_type}: {count}")
