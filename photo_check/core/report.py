"""Report exporters for analyzed batches."""

import csv
import io
import json
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Sequence

from .types import ImageRecord
from ..processors.quality.flags import ALL_FLAGS

CSV_HEADER = [
    "name",
    "size_bytes",
    "width",
    "height",
    "megapixels",
    "aspect_ratio",
    "blur_score",
    "overexposed_pct",
    "underexposed_pct",
    "flags",
    "make",
    "model",
    "datetime",
    "hash_hex",
]


def _fixed(value: float, places: int) -> str:
    """Fixed-point text of the exact binary value, ties rounded away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return format(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP), "f")


def _csv_row(record: ImageRecord) -> list:
    metadata = record.metadata
    return [
        record.name,
        str(record.size_bytes),
        str(record.width),
        str(record.height),
        _fixed(record.megapixels, 2),
        _fixed(record.aspect_ratio, 4),
        _fixed(record.blur_score, 0),
        _fixed(record.exposure.over_exposed_fraction * 100, 1),
        _fixed(record.exposure.under_exposed_fraction * 100, 1),
        "|".join(record.flags),
        (metadata.make or "") if metadata else "",
        (metadata.model or "") if metadata else "",
        (metadata.date_time or "") if metadata else "",
        record.hash_hex,
    ]


def export_csv(records: Sequence[ImageRecord]) -> str:
    """
    Header plus one comma-separated row per record, in batch order.

    Fields containing a comma, double quote or newline are quoted with
    inner quotes doubled.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(CSV_HEADER)
    for record in records:
        writer.writerow(_csv_row(record))
    return buffer.getvalue()


def export_json(records: Sequence[ImageRecord]) -> str:
    return json.dumps([record.to_dict() for record in records], indent=2)


def summarize(records: Sequence[ImageRecord]) -> Dict[str, int]:
    """Total image count plus the number of images carrying each flag."""
    summary = {"total": len(records)}
    for flag in ALL_FLAGS:
        summary[flag] = sum(1 for record in records if record.has_flag(flag))
    return summary


def format_summary(summary: Dict[str, int]) -> str:
    lines = ["=== Photo Quality Check ===", f"Images analyzed: {summary['total']}"]
    for flag in ALL_FLAGS:
        lines.append(f"  {flag}: {summary.get(flag, 0)}")
    return "\n".join(lines)
