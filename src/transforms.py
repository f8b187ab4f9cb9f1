# src/transforms.py
"""
Data-frame pipeline steps used in the walkthrough.

Each step takes a DataFrame first and returns a new DataFrame, so steps chain
with `DataFrame.pipe` (see `run_pipeline`). Column problems are raised as
KeyError, bad parameters as ValueError.
"""
from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Tuple

import numpy as np
import pandas as pd

from helpers import as_numeric_vector
from powers import make_power, make_root

AGGREGATIONS = ("mean", "sum", "min", "max", "median", "count", "std")


def _check_columns(df: pd.DataFrame, cols: Iterable[str], where: str) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise KeyError(f"[{where}] missing columns: {missing}")


def filter_rows(df: pd.DataFrame, conditions: dict | None = None) -> pd.DataFrame:
    """
    Keep rows matching every condition.

    `conditions` maps column -> scalar (equality) or list/tuple/set (membership).
    An empty/None mapping returns a copy of `df`.
    """
    conditions = conditions or {}
    _check_columns(df, conditions.keys(), "filter_rows")
    mask = pd.Series(True, index=df.index)
    for col, val in conditions.items():
        if isinstance(val, (list, tuple, set)):
            mask &= df[col].isin(list(val))
        else:
            mask &= df[col] == val
    return df.loc[mask].copy()


def select_columns(df: pd.DataFrame, columns: List[str] | None) -> pd.DataFrame:
    """Ordered column subset; None returns a copy of `df`."""
    if columns is None:
        return df.copy()
    columns = list(columns)
    _check_columns(df, columns, "select_columns")
    return df[columns].copy()


def summarise_by_group(df: pd.DataFrame, by, value_col: str, agg: str = "mean") -> pd.DataFrame:
    """
    Aggregate `value_col` within groups of `by`.

    Returns a flat frame with the grouping columns plus '{value_col}_{agg}',
    sorted by the grouping columns.
    """
    if agg not in AGGREGATIONS:
        raise ValueError(f"agg must be one of {AGGREGATIONS}, got: {agg!r}")
    by = [by] if isinstance(by, str) else list(by)
    _check_columns(df, by + [value_col], "summarise_by_group")

    out = (
        df.groupby(by, as_index=False, sort=True)[value_col]
        .agg(agg)
        .rename(columns={value_col: f"{value_col}_{agg}"})
    )
    return out.reset_index(drop=True)


def add_power_column(df: pd.DataFrame, column: str, fn: Callable, out: str | None = None) -> pd.DataFrame:
    """
    Add a column holding `fn` applied to `column`.

    `fn` is normally a PowerFunction from `powers`; any vectorised unary
    callable works. The input column is converted with `as_numeric_vector`, so
    text that is not a number raises ValueError rather than being coerced.
    """
    _check_columns(df, [column], "add_power_column")
    if out is None:
        exponent = getattr(fn, "exponent", None)
        out = f"{column}_pow{exponent:g}" if exponent is not None else f"{column}_t"

    df = df.copy()
    values = as_numeric_vector(df[column])
    result = pd.Series(np.asarray(fn(values), dtype=float), index=df.index)
    n_bad = int((~np.isfinite(result) & np.isfinite(values)).sum())
    if n_bad:
        logging.warning(f"[add_power_column] {n_bad} finite input(s) in {column!r} mapped to nan/inf by {fn!r}")
    df[out] = result
    return df


def run_pipeline(df: pd.DataFrame, steps: Iterable[Tuple[Callable, dict]]) -> pd.DataFrame:
    """
    Apply `(callable, kwargs)` steps in order via DataFrame.pipe.
    """
    for func, kwargs in steps:
        df = df.pipe(func, **(kwargs or {}))
    return df


def power_table(exponents: Iterable[float], values: Iterable[float], root_degrees: Iterable[float] = ()) -> pd.DataFrame:
    """
    Long-format table of `value ** exponent` for every exponent/value pair.

    Root degrees are added as exponents 1/degree (validated by `make_root`).
    Columns: exponent, base, value.
    """
    fns = [make_power(p) for p in exponents] + [make_root(d) for d in root_degrees]
    bases = as_numeric_vector(list(values))
    rows = []
    for fn in fns:
        res = fn(bases)
        for b, v in zip(bases.tolist(), res.tolist()):
            rows.append({"exponent": fn.exponent, "base": b, "value": v})
    return pd.DataFrame(rows, columns=["exponent", "base", "value"])
