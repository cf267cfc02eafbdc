# io_utils.py
"""
Table input for the equivalence procedures.

Pasted text and uploaded files become pandas DataFrames; the helpers at the
bottom turn those frames into the numeric inputs the backend expects while
keeping missing cells as NaN, so each procedure's `na_rm` option decides
what happens to them.
"""

from typing import Optional, Sequence, Tuple
import io
import re

import numpy as np
import pandas as pd

HEADER_MODES = ("Auto-detect", "Force header", "Force no header")

_DELIMITERS = ("\t", ",", ";")


def _is_number(token) -> bool:
    if token is None or (isinstance(token, float) and np.isnan(token)):
        return False
    try:
        float(str(token).strip())
        return True
    except ValueError:
        return False


def _detect_delimiter(lines) -> Optional[str]:
    """First delimiter present in any line, or None for whitespace-separated text."""
    for delim in _DELIMITERS:
        if any(delim in ln for ln in lines):
            return delim
    return None


def _header_in_first_row(rows, header_override: str) -> bool:
    if header_override == "Force header":
        return True
    if header_override == "Force no header":
        return False
    if not rows:
        return False
    first_numeric = sum(1 for tok in rows[0] if _is_number(tok))
    later_numeric = sum(1 for r in rows[1:] for tok in r if _is_number(tok))
    return first_numeric == 0 and later_numeric >= 1


def _frame_from_rows(rows, header_override: str) -> Tuple[pd.DataFrame, bool]:
    width = max((len(r) for r in rows), default=0)
    rows = [list(r) + [None] * (width - len(r)) for r in rows]
    header_used = _header_in_first_row(rows, header_override)
    if header_used:
        columns = [
            str(c).strip() if c is not None and str(c).strip() else f"col{i}"
            for i, c in enumerate(rows[0], start=1)
        ]
        df = pd.DataFrame(rows[1:], columns=columns)
    else:
        df = pd.DataFrame(rows, columns=[f"col{i}" for i in range(1, width + 1)])
    df = df.replace({"": pd.NA, " ": pd.NA}).astype(object)
    return df.where(df.notna(), pd.NA), header_used


def parse_table_from_text(raw_text: str, header_override: str = "Auto-detect") -> Tuple[pd.DataFrame, bool]:
    """
    Parse a pasted text table into a DataFrame.

    Parameters
    ----------
    raw_text : str
        Tab-, comma- or semicolon-separated text; whitespace is used when none
        of those delimiters occur.
    header_override : str, optional
        One of "Auto-detect", "Force header", "Force no header". Auto-detect
        treats the first row as a header when it has no numeric cell and
        later rows have at least one.

    Returns
    -------
    Tuple[pandas.DataFrame, bool]
        (df, header_used). Empty cells are pd.NA.
    """
    lines = [ln.rstrip() for ln in raw_text.splitlines() if ln.strip()]
    if not lines:
        return pd.DataFrame(), False

    delim = _detect_delimiter(lines)
    if delim is None:
        rows = [re.split(r"\s+", ln.strip()) for ln in lines]
    else:
        rows = [[tok.strip() for tok in ln.split(delim)] for ln in lines]
    return _frame_from_rows(rows, header_override)


def read_table_from_bytes(
    content: bytes,
    filename: str = "uploaded_file",
    header_override: str = "Auto-detect",
) -> Tuple[pd.DataFrame, bool]:
    """
    Read an uploaded file into a DataFrame.

    Excel files are read with pandas (openpyxl for .xlsx, xlrd for .xls);
    anything else is decoded as UTF-8 text and handed to
    `parse_table_from_text`.

    Raises
    ------
    ValueError
        If an Excel file cannot be read.
    """
    fname = (filename or "").lower()
    ext = fname.rsplit(".", 1)[-1] if "." in fname else ""

    if ext in ("xls", "xlsx"):
        engine = "xlrd" if ext == "xls" else "openpyxl"
        try:
            raw = pd.read_excel(io.BytesIO(content), header=None, dtype=object, engine=engine)
        except ImportError as e:
            raise ValueError(
                f"Reading .{ext} files requires the optional dependency '{engine}' (pip install {engine})."
            ) from e
        except Exception as e:
            raise ValueError(f"Failed to read .{ext} file '{filename}': {e}") from e
        rows = [[None if pd.isna(v) else str(v) for v in row] for row in raw.itertuples(index=False)]
        return _frame_from_rows(rows, header_override)

    text = content.decode("utf-8-sig", errors="replace")
    return parse_table_from_text(text, header_override=header_override)


# -------------------------
# Numeric views for the backend
# -------------------------
def numeric_frame(df: pd.DataFrame, columns: Optional[Sequence[str]] = None) -> pd.DataFrame:
    """Coerce the selected columns (all by default) to float; unparseable cells become NaN."""
    cols = list(df.columns) if columns is None else list(columns)
    num = df[cols].apply(pd.to_numeric, errors="coerce")
    return pd.DataFrame(num.to_numpy(dtype=float, na_value=np.nan), columns=num.columns, index=num.index)


def two_column_samples(df: pd.DataFrame) -> Tuple[np.ndarray, np.ndarray]:
    """
    First two columns as independent samples.

    Trailing empty cells of the shorter column are dropped (ragged columns
    are the normal layout for unequal group sizes); interior missing values
    stay NaN.
    """
    if df is None or df.shape[1] < 2:
        raise ValueError("Two-sample tests require two columns (group1, group2).")
    num = numeric_frame(df, df.columns[:2])
    out = []
    for col in num.columns:
        s = num[col]
        last = s.last_valid_index()
        out.append(s.loc[:last].to_numpy() if last is not None else np.array([], dtype=float))
    return out[0], out[1]
