# src/subsetting.py
"""
Row/column indexing, filtering and binding for the gapminder table.

Every function takes a DataFrame and returns a new one; the input is never
modified. Row-returning functions keep the original row order and reset the
index so that results compare cleanly.
"""
from __future__ import annotations

import operator
from typing import Callable, Iterable

import numpy as np
import pandas as pd

from helpers import _require_columns, _coerce_list

_OPS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def take_rows(df: pd.DataFrame, start: int | None = None, stop: int | None = None) -> pd.DataFrame:
    """
    Positional row range, 0-based with `stop` exclusive (Python slice rules).
    """
    return df.iloc[start:stop].copy().reset_index(drop=True)


def take_columns(df: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
    """
    Select named columns in the order given.
    """
    cols = _coerce_list(columns) or []
    _require_columns(df, cols)
    return df.loc[:, cols].copy()


def filter_rows(df: pd.DataFrame, column: str, op: str, value) -> pd.DataFrame:
    """
    Keep rows where `df[column] <op> value` holds.

    Parameters
    ----------
    op : {"==", "!=", "<", "<=", ">", ">="}
    """
    if op not in _OPS:
        raise ValueError(f"Unknown comparison {op!r}; expected one of {sorted(_OPS)}")
    _require_columns(df, [column])
    mask = _OPS[op](df[column], value)
    return df.loc[mask.fillna(False).astype(bool)].copy().reset_index(drop=True)


def filter_in(df: pd.DataFrame, column: str, values) -> pd.DataFrame:
    """
    Keep rows whose `column` value is one of `values`.

    `values` may be a scalar, a list-like or a ';'-separated string.
    None or an empty collection keeps every row.
    """
    _require_columns(df, [column])
    vals = _coerce_list(values)
    if not vals:
        return df.copy().reset_index(drop=True)
    return df.loc[df[column].isin(vals)].copy().reset_index(drop=True)


def bind_columns(df: pd.DataFrame, **columns) -> pd.DataFrame:
    """
    Append new columns. Each value is a scalar (broadcast) or a sequence of
    length len(df), matched by position.
    """
    out = df.copy()
    for name, values in columns.items():
        if name in out.columns:
            raise ValueError(f"Column '{name}' already exists")
        if np.isscalar(values) or values is None:
            out[name] = values
            continue
        arr = np.asarray(values)
        if arr.ndim != 1 or len(arr) != len(out):
            raise ValueError(
                f"Column '{name}' has {len(arr)} values; table has {len(out)} rows"
            )
        out[name] = arr
    return out


def bind_rows(df: pd.DataFrame, other: pd.DataFrame) -> pd.DataFrame:
    """
    Append the rows of `other` below `df`. Both tables must carry the same
    column set; `other` is reordered to `df`'s column order.
    """
    left, right = set(df.columns), set(other.columns)
    if left != right:
        raise ValueError(
            f"Cannot bind rows: columns differ (only left: {sorted(left - right)}, "
            f"only right: {sorted(right - left)})"
        )
    return pd.concat([df, other[list(df.columns)]], ignore_index=True, sort=False)


def add_derived_column(df: pd.DataFrame, name: str, func: Callable[[pd.DataFrame], object]) -> pd.DataFrame:
    """
    Add (or replace) column `name` computed elementwise from the table.

    Example
    -------
    add_derived_column(df, "pop_millions", lambda d: d["population"] / 1e6)
    """
    out = df.copy()
    values = func(out)
    if isinstance(values, pd.Series):
        values = values.reindex(out.index)
    out[name] = values
    return out
