# src/helpers.py
"""
General-purpose helpers shared across the walkthrough.

This module centralizes small utilities that are agnostic to any one lab step:
- Explicit vector conversions (numeric / character / logical). Mixed inputs are
  never silently collapsed to a common type; unconvertible values raise.
- List and flag coercions for config values.

IMPORTANT: This module does not import project-specific modules to avoid circular
dependencies. Callers must supply any configuration defaults they need.
"""
from __future__ import annotations

import numpy as np
import pandas as pd

# ---------------------------------------------------------------------------
# Vectors
# ---------------------------------------------------------------------------

_TRUE_TOKENS = {"true", "t", "yes", "y", "1"}
_FALSE_TOKENS = {"false", "f", "no", "n", "0"}


def _as_series(values, name=None) -> pd.Series:
    if isinstance(values, pd.Series):
        s = values.copy()
        if name is not None:
            s.name = name
        return s
    if np.isscalar(values) or values is None:
        values = [values]
    return pd.Series(list(values), name=name, dtype=object)


def _is_missing(v) -> bool:
    return v is None or (isinstance(v, float) and np.isnan(v)) or v is pd.NA


def as_numeric_vector(values, name: str | None = None) -> pd.Series:
    """
    Convert `values` to a float Series, refusing anything that is not a number.

    Strings holding numbers ('3', ' 2.5 ') are accepted; booleans and any other
    text are rejected. Missing values (None / nan) stay nan.

    Parameters
    ----------
    values : scalar, list-like or pd.Series
    name : str, optional
        Name of the returned Series.

    Returns
    -------
    pd.Series
        dtype float64, same index as `values` when it is a Series.

    Raises
    ------
    ValueError
        On the first element that cannot be converted.
    """
    s = _as_series(values, name)
    if pd.api.types.is_bool_dtype(s.dtype):
        raise ValueError(f"Cannot convert logical vector {s.name!r} to numeric.")
    if pd.api.types.is_numeric_dtype(s.dtype):
        return s.astype(float)

    out = []
    for v in s.tolist():
        if _is_missing(v):
            out.append(np.nan)
            continue
        if isinstance(v, (bool, np.bool_)):
            raise ValueError(f"Cannot convert {v!r} to numeric.")
        try:
            out.append(float(str(v).strip()) if isinstance(v, str) else float(v))
        except (TypeError, ValueError):
            raise ValueError(f"Cannot convert {v!r} to numeric.") from None
    return pd.Series(out, index=s.index, name=s.name, dtype=float)


def as_character_vector(values, name: str | None = None) -> pd.Series:
    """
    Convert `values` to a pandas 'string' Series; missing values stay <NA>.
    """
    s = _as_series(values, name)
    out = [pd.NA if _is_missing(v) else str(v) for v in s.tolist()]
    return pd.Series(out, index=s.index, name=s.name, dtype="string")


def as_logical_vector(values, name: str | None = None) -> pd.Series:
    """
    Convert `values` to a pandas 'boolean' Series.

    Accepted: bools, 0/1, and (case-insensitive) true/false, t/f, yes/no, y/n.
    Missing values stay <NA>.

    Raises
    ------
    ValueError
        On any other value.
    """
    s = _as_series(values, name)
    out = []
    for v in s.tolist():
        if _is_missing(v):
            out.append(pd.NA)
        elif isinstance(v, (bool, np.bool_)):
            out.append(bool(v))
        elif isinstance(v, (int, float, np.integer, np.floating)) and v in (0, 1):
            out.append(bool(v))
        elif isinstance(v, str) and v.strip().lower() in _TRUE_TOKENS:
            out.append(True)
        elif isinstance(v, str) and v.strip().lower() in _FALSE_TOKENS:
            out.append(False)
        else:
            raise ValueError(f"Cannot convert {v!r} to logical.")
    return pd.Series(out, index=s.index, name=s.name, dtype="boolean")


# ---------------------------------------------------------------------------
# List / string coercions for config-like values
# ---------------------------------------------------------------------------

def _coerce_list(x):
    """
    Coerce input to a flat list of strings.

    Rules
    -----
    - If `x` is a list, flatten one level; split any string items on ';' or ','.
    - If `x` is a string, split on ';' or ',' and strip.
    - Otherwise return None (caller should fall back to project defaults).

    Parameters
    ----------
    x : Any

    Returns
    -------
    list[str] | None
    """
    if isinstance(x, (list, tuple)):
        flat: list[str] = []
        for it in x:
            if isinstance(it, (list, tuple)):
                flat.extend(str(i) for i in it)
            elif isinstance(it, str) and (";" in it or "," in it):
                flat.extend(
                    [s.strip() for s in it.replace(",", ";").split(";") if s.strip()]
                )
            else:
                flat.append(str(it))
        return flat
    if isinstance(x, str):
        if ";" in x or "," in x:
            return [s.strip() for s in x.replace(",", ";").split(";") if s.strip()]
        return [x.strip()]
    return None


def _coerce_float_list(x):
    """
    Like `_coerce_list`, but for numeric config values (e.g. exponent lists).

    A bare number becomes a one-element list. Returns None for None/unsupported
    input; raises ValueError if an item is not a number.
    """
    if isinstance(x, bool):
        return None
    if isinstance(x, (int, float)):
        return [float(x)]
    items = _coerce_list(x)
    if items is None:
        return None
    return as_numeric_vector(items).tolist()


def _coerce_bool(x, default: bool) -> bool:
    """
    Read a config flag through `as_logical_vector`, so quoted "false"/"no"
    are honoured instead of being truthy. None falls back to `default`.
    """
    if x is None:
        return default
    return bool(as_logical_vector([x]).iloc[0])
