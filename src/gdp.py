# src/gdp.py
"""
Total GDP from population and GDP per capita, with optional year/country filters.

`calc_gdp` is the reusable function of the lesson:

    calc_gdp(dat)                                   # every row, plus 'gdp'
    calc_gdp(dat, year=2007)                        # only 2007
    calc_gdp(dat, year=[1952, 2007], country="Australia;New Zealand")

Filters are membership tests; an absent or empty filter applies no constraint.
The caller's table is never modified.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

import pandas as pd

from helpers import _require_columns, _numeric_column, _coerce_list, _coerce_years

REQUIRED_COLUMNS = ["year", "country", "population", "gdp_per_capita"]


@dataclass(frozen=True)
class GdpFilter:
    """
    Acceptable values for 'year' and 'country'. Empty set = no constraint.
    """
    years: frozenset = field(default_factory=frozenset)
    countries: frozenset = field(default_factory=frozenset)

    @classmethod
    def from_values(cls, year=None, country=None) -> "GdpFilter":
        return cls(
            years=frozenset(_coerce_years(year)),
            countries=frozenset(_coerce_list(country) or []),
        )

    @classmethod
    def from_config(cls, cfg: dict) -> "GdpFilter":
        f = (cfg or {}).get("filters", {}) or {}
        return cls.from_values(year=f.get("year"), country=f.get("country"))

    @property
    def is_empty(self) -> bool:
        return not self.years and not self.countries


def calc_gdp(dat: pd.DataFrame, year=None, country=None, *, filters: Optional[GdpFilter] = None) -> pd.DataFrame:
    """
    Subset `dat` by year and/or country and append a 'gdp' column.

    Parameters
    ----------
    dat : pd.DataFrame
        Must contain 'year', 'country', 'population', 'gdp_per_capita'.
    year : int | Iterable[int] | str | None
        Years to keep. None or empty keeps all years.
    country : str | Iterable[str] | None
        Countries to keep. None or empty keeps all countries.
    filters : GdpFilter, optional
        Pre-built filter; takes precedence over `year` and `country`.

    Returns
    -------
    pd.DataFrame
        Retained rows in their original order (fresh RangeIndex) with
        gdp = population * gdp_per_capita.

    Raises
    ------
    MissingColumnError
        A required column is absent.
    TypeMismatchError
        'population' or 'gdp_per_capita' is not numeric.
    """
    if filters is None:
        filters = GdpFilter.from_values(year=year, country=country)

    _require_columns(dat, REQUIRED_COLUMNS)
    pop = _numeric_column(dat, "population")
    gdp_pc = _numeric_column(dat, "gdp_per_capita")

    keep = pd.Series(True, index=dat.index)
    if filters.years:
        keep &= dat["year"].isin(filters.years)
    if filters.countries:
        keep &= dat["country"].isin(filters.countries)

    out = dat.loc[keep].copy()
    out["gdp"] = pop[keep] * gdp_pc[keep]
    return out.reset_index(drop=True)


def gdp_by_group(dat: pd.DataFrame, by: Sequence[str] = ("continent",), year=None, country=None) -> pd.DataFrame:
    """
    Total GDP and population per group after `calc_gdp` filtering.

    Returns
    -------
    pd.DataFrame
        One row per group with columns `by` + ['population', 'gdp',
        'gdp_per_capita'], where gdp_per_capita is the population-weighted
        mean (total gdp / total population).
    """
    by = _coerce_list(by) or []
    if not by:
        raise ValueError("gdp_by_group needs at least one grouping column")
    _require_columns(dat, by)
    df = calc_gdp(dat, year=year, country=country)
    df["population"] = _numeric_column(df, "population")
    grouped = (
        df.groupby(by, as_index=False, sort=True)[["population", "gdp"]]
          .sum()
    )
    grouped["gdp_per_capita"] = grouped["gdp"] / grouped["population"].where(grouped["population"] > 0)
    return grouped
