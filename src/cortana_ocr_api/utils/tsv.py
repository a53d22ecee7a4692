"""Parser for tesseract TSV output.

Every data row becomes a BoundingBox, whatever its level (page, block,
paragraph, line or word). Numeric columns are parsed leniently: a leading
number is used and anything unparseable becomes None.
"""

import math
import re
from typing import Optional

from cortana_ocr_api.models import BoundingBox

TSV_COLUMNS = (
    "level",
    "page_num",
    "block_num",
    "par_num",
    "line_num",
    "word_num",
    "left",
    "top",
    "width",
    "height",
    "conf",
    "text",
)

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_int(value: str) -> Optional[int]:
    match = _INT_PREFIX.match(value)
    return int(match.group(1)) if match else None


def parse_float(value: str) -> Optional[float]:
    match = _FLOAT_PREFIX.match(value)
    if not match:
        return None
    number = float(match.group(1))
    return number if math.isfinite(number) else None


def _add(a: Optional[int], b: Optional[int]) -> Optional[int]:
    if a is None or b is None:
        return None
    return a + b


def parse_row(line: str) -> BoundingBox:
    """Turn one TSV data line into a BoundingBox."""
    fields = line.split("\t")
    fields += [""] * (len(TSV_COLUMNS) - len(fields))
    row = dict(zip(TSV_COLUMNS, fields))

    left = parse_int(row["left"])
    top = parse_int(row["top"])
    width = parse_int(row["width"])
    height = parse_int(row["height"])

    return BoundingBox(
        text=row["text"].strip(),
        confidence=parse_float(row["conf"]),
        x_min=left,
        y_min=top,
        x_max=_add(left, width),
        y_max=_add(top, height),
    )


def parse_tsv(content: str) -> list[BoundingBox]:
    """Parse a whole TSV document, skipping the header and blank lines."""
    lines = content.split("\n")[1:]
    return [parse_row(line) for line in lines if line.strip()]
