# src/powers.py
"""
Parametrised power and root functions.

`make_power(p)` returns a callable that raises its input to the fixed power
`p`; `make_root(n)` is the same with `p = 1/n`. The exponent is captured once
and exposed as a read-only attribute, so a generated function can be
inspected, compared and reused from any number of call sites.

Domain policy
-------------
Results follow real-valued floating-point power semantics and are never
raised as errors:
- negative base with a non-integer exponent -> nan
- 0 ** negative exponent                    -> inf
The only error raised is `DomainError`, by `make_root` for a zero (or nan)
degree.
"""
from __future__ import annotations

import numbers
import numpy as np
import pandas as pd

__all__ = ("DomainError", "PowerFunction", "make_power", "make_root")


class DomainError(ValueError):
    """A power/root parameter for which the function is undefined."""


class PowerFunction:
    """
    Callable computing ``base ** exponent`` for a fixed exponent.

    Parameters
    ----------
    exponent : float
        Power applied to every input.

    Examples
    --------
    >>> cube = PowerFunction(3)
    >>> cube(2.0)
    8.0
    >>> PowerFunction(0.5)([4, 9])
    array([2., 3.])
    """
    __slots__ = ("_exponent",)

    def __init__(self, exponent):
        if isinstance(exponent, bool) or not isinstance(exponent, numbers.Real):
            raise TypeError(f"exponent must be a real number, got {exponent!r}")
        self._exponent = float(exponent)

    @property
    def exponent(self) -> float:
        return self._exponent

    def __call__(self, base):
        with np.errstate(invalid="ignore", divide="ignore", over="ignore"):
            out = np.power(np.asarray(base, dtype=float), self._exponent)
        if isinstance(base, pd.Series):
            return pd.Series(out, index=base.index, name=base.name)
        if np.ndim(out) == 0:
            return float(out)
        return out

    def __eq__(self, other):
        if not isinstance(other, PowerFunction):
            return NotImplemented
        return self._exponent == other._exponent

    def __hash__(self):
        return hash((PowerFunction, self._exponent))

    def __repr__(self):
        return f"{type(self).__name__}(exponent={self._exponent:g})"


def make_power(exponent) -> PowerFunction:
    """
    Return a function computing ``base ** exponent``.

    Any real exponent is accepted (fractional, zero, negative). Undefined
    results are returned as nan/inf rather than raised; see module docstring.
    """
    return PowerFunction(exponent)


def make_root(degree) -> PowerFunction:
    """
    Return a function computing the `degree`-th root, i.e. ``make_power(1/degree)``.

    Raises
    ------
    DomainError
        If `degree` is zero or nan.
    """
    if isinstance(degree, bool) or not isinstance(degree, numbers.Real):
        raise TypeError(f"degree must be a real number, got {degree!r}")
    d = float(degree)
    if d == 0.0 or np.isnan(d):
        raise DomainError(f"root degree must be nonzero and not nan, got {degree!r}")
    return PowerFunction(1.0 / d)
