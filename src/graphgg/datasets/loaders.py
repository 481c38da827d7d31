"""Loaders for node and edge tables.

Tables can be loaded from:
- JSONL: One JSON object per line
- JSON: Array of objects
- CSV: Comma-separated values with a header row

Edge tables need ``from``/``to`` columns (or use the first two columns);
node tables need a ``name`` column. In CSV files these identifier columns
are read as text, so ids such as ``007`` and ``7`` stay distinct.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd

ID_COLUMNS = ("name", "from", "to")


class DataLoadError(Exception):
    """Raised when data loading fails."""
    def __init__(self, message: str, path: Path, line_number: int | None = None):
        super().__init__(message)
        self.path = path
        self.line_number = line_number


def detect_format(path: Path) -> str:
    """Detect file format from extension.

    Returns:
        One of: 'jsonl', 'json', 'csv'

    Raises:
        DataLoadError: If format cannot be determined
    """
    suffix = path.suffix.lower()
    if suffix == '.jsonl':
        return 'jsonl'
    elif suffix == '.json':
        return 'json'
    elif suffix == '.csv':
        return 'csv'
    else:
        raise DataLoadError(
            f"Unknown table format: {suffix}. Supported: .jsonl, .json, .csv",
            path
        )


def load_table(path: Path | str, limit: int | None = None) -> pd.DataFrame:
    """Load a node or edge table into a DataFrame.

    Args:
        path: Path to a JSONL, JSON or CSV file (auto-detected by extension)
        limit: Optional limit on number of rows

    Raises:
        DataLoadError: If file cannot be loaded or parsed
    """
    path = Path(path)
    if not path.exists():
        raise DataLoadError(f"File not found: {path}", path)

    format_type = detect_format(path)

    if format_type == 'csv':
        return _load_csv(path, limit)
    if format_type == 'jsonl':
        records = _load_jsonl(path)
    else:
        records = _load_json(path)

    for i, record in enumerate(records):
        if not isinstance(record, dict):
            raise DataLoadError(
                f"Record {i} is not an object",
                path,
                line_number=i + 1
            )

    if limit is not None:
        records = records[:limit]
    return pd.DataFrame.from_records(records)


def load_records(path: Path | str, limit: int | None = None) -> list[dict[str, Any]]:
    """Load rows of a table as dicts; missing cells become None."""
    table = load_table(path, limit)
    return table.astype(object).where(table.notna(), None).to_dict("records")


def _load_jsonl(path: Path) -> list[dict[str, Any]]:
    """Load records from JSONL file (one JSON object per line)."""
    records = []
    with open(path, 'r', encoding='utf-8') as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise DataLoadError(
                    f"Invalid JSON on line {line_num}: {e}",
                    path,
                    line_number=line_num
                ) from e
    return records


def _load_json(path: Path) -> list[dict[str, Any]]:
    """Load records from JSON file (array of objects)."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise DataLoadError(f"Invalid JSON: {e}", path) from e

    if not isinstance(data, list):
        raise DataLoadError("JSON file must contain an array of objects", path)

    return data


def _load_csv(path: Path, limit: int | None) -> pd.DataFrame:
    """Load a CSV file with pandas, keeping identifier columns as text."""
    try:
        header = pd.read_csv(path, encoding='utf-8-sig', nrows=0).columns
        dtype = {column: str for column in ID_COLUMNS if column in header}
        return pd.read_csv(path, encoding='utf-8-sig', dtype=dtype, nrows=limit)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise DataLoadError(f"Invalid CSV: {e}", path) from e


__all__ = ["load_records", "load_table", "detect_format", "DataLoadError", "ID_COLUMNS"]
