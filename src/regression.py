# src/regression.py
"""
Simple linear regression of one column on another (response ~ predictor).
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

from helpers import _require_columns, _numeric_column


@dataclass(frozen=True)
class LinearFit:
    response: str
    predictor: str
    intercept: float
    slope: float
    r_squared: float
    n_obs: int

    def predict(self, x):
        """
        Fitted values for scalar or array-like `x`.
        """
        if np.isscalar(x):
            return float(self.intercept + self.slope * x)
        return self.intercept + self.slope * np.asarray(x, dtype=float)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame([{
            "response": self.response,
            "predictor": self.predictor,
            "intercept": self.intercept,
            "slope": self.slope,
            "r_squared": self.r_squared,
            "n_obs": self.n_obs,
        }])

    def __str__(self):
        return (
            f"{self.response} ~ {self.predictor}: "
            f"intercept={self.intercept:.6g}, slope={self.slope:.6g}, "
            f"R^2={self.r_squared:.4f} (n={self.n_obs})"
        )


def _xy(df: pd.DataFrame, response: str, predictor: str):
    _require_columns(df, [response, predictor])
    y = _numeric_column(df, response).astype(float)
    x = _numeric_column(df, predictor).astype(float)
    ok = x.notna() & y.notna()
    return x[ok].to_numpy(), y[ok].to_numpy()


def fit_linear(df: pd.DataFrame, response: str, predictor: str) -> LinearFit:
    """
    Ordinary least squares fit of `response` on `predictor` with an intercept.

    Rows with a missing value in either column are dropped before fitting.

    Raises
    ------
    MissingColumnError
        Either column is absent.
    TypeMismatchError
        Either column is not numeric.
    ValueError
        Fewer than two usable rows, or a constant predictor.
    """
    x, y = _xy(df, response, predictor)
    n = len(x)
    if n < 2:
        raise ValueError(f"Need at least 2 complete rows to fit {response} ~ {predictor}, got {n}")

    x_bar, y_bar = x.mean(), y.mean()
    sxx = float(np.sum((x - x_bar) ** 2))
    if sxx == 0.0:
        raise ValueError(f"Predictor '{predictor}' is constant; slope is undefined")
    sxy = float(np.sum((x - x_bar) * (y - y_bar)))
    slope = sxy / sxx
    intercept = float(y_bar - slope * x_bar)

    ss_tot = float(np.sum((y - y_bar) ** 2))
    ss_res = float(np.sum((y - (intercept + slope * x)) ** 2))
    # perfectly flat response: the line explains everything there is
    r2 = 1.0 - ss_res / ss_tot if ss_tot > 0 else 1.0

    return LinearFit(
        response=response,
        predictor=predictor,
        intercept=intercept,
        slope=float(slope),
        r_squared=float(r2),
        n_obs=int(n),
    )


def residuals(df: pd.DataFrame, fit: LinearFit) -> pd.Series:
    """
    Observed minus fitted values, aligned to `df.index` (NaN where either
    input is missing).
    """
    _require_columns(df, [fit.response, fit.predictor])
    y = _numeric_column(df, fit.response).astype(float)
    x = _numeric_column(df, fit.predictor).astype(float)
    return (y - (fit.intercept + fit.slope * x)).rename("residual")
