"""
General-purpose helpers shared across the lesson modules.

This module centralizes reusable utilities that are agnostic to the lesson
step that calls them:
- Error types raised when a table does not have the expected shape.
- Column presence and numeric-type validation.
- List/string coercions for filter values coming from config or callers.
- Filename suffix manipulation.

All functions are pure and side-effect free.

IMPORTANT: This module does not import project-specific modules to avoid circular
dependencies.
"""
from __future__ import annotations

import os
import numpy as np
import pandas as pd


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class MissingColumnError(KeyError):
    """A required column is absent from the input table."""

    def __init__(self, missing, available=None):
        self.missing = list(missing)
        self.available = list(available) if available is not None else []
        super().__init__(
            f"Missing required column(s) {self.missing}; "
            f"available: {self.available}"
        )

    def __str__(self):
        # KeyError repr()s its message; keep it readable
        return self.args[0]


class TypeMismatchError(TypeError):
    """A column that must be numeric holds non-numeric values."""

    def __init__(self, column: str, dtype=None):
        self.column = column
        self.dtype = str(dtype) if dtype is not None else None
        msg = f"Column '{column}' must be numeric"
        if self.dtype is not None:
            msg += f", got dtype {self.dtype}"
        super().__init__(msg)


# ---------------------------------------------------------------------------
# Column validation
# ---------------------------------------------------------------------------

def _require_columns(df: pd.DataFrame, columns) -> None:
    """
    Raise MissingColumnError if any of `columns` is absent from `df`.

    Parameters
    ----------
    df : pd.DataFrame
    columns : Iterable[str]
    """
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise MissingColumnError(missing, df.columns)


def _numeric_column(df: pd.DataFrame, column: str) -> pd.Series:
    """
    Return `df[column]` as a numeric Series.

    Numeric dtypes pass through unchanged. Object columns are coerced with
    `pd.to_numeric`; any value that cannot be parsed raises TypeMismatchError.
    Boolean columns are rejected.

    Returns
    -------
    pd.Series
        Numeric series aligned to `df.index`.
    """
    s = df[column]
    if pd.api.types.is_bool_dtype(s):
        raise TypeMismatchError(column, s.dtype)
    if pd.api.types.is_numeric_dtype(s):
        return s
    if pd.api.types.is_object_dtype(s) or pd.api.types.is_string_dtype(s):
        if s.map(lambda v: isinstance(v, (bool, np.bool_))).any():
            raise TypeMismatchError(column, s.dtype)
        try:
            return pd.to_numeric(s, errors="raise")
        except (ValueError, TypeError):
            raise TypeMismatchError(column, s.dtype) from None
    raise TypeMismatchError(column, s.dtype)


# ---------------------------------------------------------------------------
# List / string coercions for filter values
# ---------------------------------------------------------------------------

def _coerce_list(x):
    """
    Coerce input to a flat list.

    Rules
    -----
    - None returns None (no constraint).
    - A bare string is split on ';' and stripped. Commas are kept, since
      values such as "Korea, Rep." contain them.
    - A list, tuple, set, frozenset, pd.Series, pd.Index or np.ndarray is
      flattened one level; its items are taken as-is and never split.
    - Any other scalar is wrapped in a one-item list.

    Non-string items keep their type, so integer years stay integers.

    Parameters
    ----------
    x : Any

    Returns
    -------
    list | None
    """
    if x is None:
        return None
    if isinstance(x, str):
        return _split_str(x)
    if isinstance(x, (list, tuple, set, frozenset, pd.Series, pd.Index, np.ndarray)):
        flat: list = []
        for it in x:
            if isinstance(it, (list, tuple, set, frozenset)):
                flat.extend(it)
            else:
                flat.append(it)
        return flat
    return [x]


def _split_str(s: str) -> list[str]:
    return [p.strip() for p in s.split(";") if p.strip()]


def _coerce_years(values) -> list:
    """
    Coerce year-like filter values to ints where possible.

    '2007' -> 2007, 2007.0 -> 2007. Values that are not integral are kept
    as given so that they simply match nothing.
    """
    out = []
    for v in _coerce_list(values) or []:
        try:
            f = float(v)
        except (TypeError, ValueError):
            out.append(v)
            continue
        out.append(int(f) if np.isfinite(f) and f == int(f) else v)
    return out


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------

def _with_suffix(fname: str, suffix: str) -> str:
    """
    Insert a suffix before the file extension.

    Example
    -------
    _with_suffix("foo.csv", "_bar") -> "foo_bar.csv"
    """
    if not suffix:
        return fname
    base, ext = os.path.splitext(fname)
    return f"{base}{suffix}{ext}"
