from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pandas as pd


def build_frame(
    data: List[Dict],
    column_map: Dict[str, str] | None = None,
) -> pd.DataFrame:
    """
    Build a DataFrame from a list of dicts with friendly headers and safe handling of missing keys.

    Args:
        data: List of dictionaries (each dict = row)
        column_map: Mapping of data keys -> friendly column names, in display order
    """
    rows = [dict(row) for row in data]

    # Fill missing keys to avoid KeyError
    if column_map:
        for row in rows:
            for key in column_map.keys():
                row.setdefault(key, None)

    df = pd.DataFrame(rows, columns=list(column_map.keys()) if column_map else None)

    if column_map:
        df = df.rename(columns=column_map)
    return df


def export_to_excel(
    file_path: Path,
    sheets: Dict[str, pd.DataFrame],
    headerless: Optional[Sequence[str]] = None,
) -> Path:
    """
    Write one workbook with a sheet per DataFrame (openpyxl engine).

    Sheets named in `headerless` are written as plain key/value grids.
    """
    headerless = set(headerless or [])
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with pd.ExcelWriter(file_path, engine="openpyxl") as writer:
        for sheet_name, df in sheets.items():
            # Excel caps sheet names at 31 chars
            df.to_excel(
                writer,
                index=False,
                header=sheet_name not in headerless,
                sheet_name=sheet_name[:31],
            )
    return file_path
