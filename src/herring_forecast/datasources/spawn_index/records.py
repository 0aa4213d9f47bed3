"""Parse the spawn index CSV into raw row dicts.

Values are left as strings; ``analysis.normalize`` owns all coercion.
"""

from __future__ import annotations

import csv
import io
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


def parse_spawn_csv(text: str) -> list[dict[str, str]]:
    """Parse CSV text into one dict per data row.

    A UTF-8 byte-order mark and surrounding whitespace in header names are
    ignored.
    """
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    if reader.fieldnames:
        reader.fieldnames = [name.strip() for name in reader.fieldnames]
    return [dict(row) for row in reader]


def read_spawn_csv(path: Path) -> list[dict[str, str]]:
    """Read and parse a spawn index CSV file."""
    return parse_spawn_csv(path.read_text(encoding="utf-8-sig"))
