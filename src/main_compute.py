# ------------------------------------------------------------------------------
# Gapminder lesson runner.
# - Loads config.yaml (falls back to built-in defaults).
# - Loads the gapminder table (CSV path/URL or .rds).
# - Builds, in order:
#     * gdp               calc_gdp() with the configured year/country filters
#     * gdp_by_continent  total GDP per (year, group), one calc_gdp() per year
#     * regression        response ~ predictor linear fit over the filtered rows
# - Writes one file per output in results_dir:
#     * <name>{suffix}.csv (and .parquet when output.write_parquet is set)
# - Single TQDM progress bar over years.
# ------------------------------------------------------------------------------


from __future__ import annotations
from typing import Optional, Dict, List
import os
import sys
import argparse
import pandas as pd
from tqdm import tqdm

from data_loaders import (
    load_gapminder,
    describe_table,
    _load_config,
    UnreachableSourceError,
    ParseError,
)
from gdp import GdpFilter, calc_gdp, gdp_by_group
from regression import fit_linear
from helpers import _with_suffix, _coerce_list, MissingColumnError, TypeMismatchError

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
CONFIG_PATH = os.path.join(ROOT_DIR, "config.yaml")


def _print_summary(df: pd.DataFrame) -> None:
    info = describe_table(df)
    print(f"[data] {info['n_rows']:,} rows x {info['n_cols']} columns")
    for col in info["columns"]:
        miss = info["n_missing"][col]
        extra = f" ({miss} missing)" if miss else ""
        print(f"[data]   {col}: {info['dtypes'][col]}{extra}")


def run_lesson(cfg: dict, PATHS: dict, *, data: Optional[pd.DataFrame] = None) -> Dict[str, pd.DataFrame]:
    """
    Run every lesson step and return the result frames keyed by name.
    """
    verbose = bool(cfg.get("diagnostics", {}).get("verbose", True))
    if data is None:
        data = load_gapminder(PATHS["gapminder_csv"], aliases=cfg.get("columns"), verbose=verbose)
    if verbose:
        _print_summary(data)

    filters = GdpFilter.from_config(cfg)
    gdp = calc_gdp(data, filters=filters)
    if verbose:
        desc = "no filters" if filters.is_empty else (
            f"years={sorted(filters.years, key=str)} countries={sorted(filters.countries, key=str)}"
        )
        print(f"[gdp] {len(gdp):,} of {len(data):,} rows kept ({desc}).")

    group_cols = _coerce_list(cfg.get("grouping", {}).get("by")) or ["continent"]
    years: List = sorted(gdp["year"].dropna().unique().tolist())
    per_year: List[pd.DataFrame] = []
    missing_groups = [c for c in group_cols if c not in gdp.columns]
    if missing_groups:
        print(f"[gdp] Grouping column(s) {missing_groups} not in data; skipping grouped totals.")
    else:
        for yr in tqdm(years, desc="GDP by group", unit="year", disable=not verbose):
            g = gdp_by_group(gdp, by=group_cols, year=yr)
            g.insert(0, "year", yr)
            per_year.append(g)
    by_group = (
        pd.concat(per_year, ignore_index=True)
        if per_year
        else pd.DataFrame(columns=["year", *group_cols, "population", "gdp", "gdp_per_capita"])
    )

    reg = cfg.get("regression", {}) or {}
    response = reg.get("response", "life_exp")
    predictor = reg.get("predictor", "year")
    try:
        fit = fit_linear(gdp, response, predictor)
    except (ValueError, MissingColumnError, TypeMismatchError) as e:
        # e.g. a single-year filter with predictor 'year', or no life_exp column
        print(f"[regression] Skipped {response} ~ {predictor}: {e}")
        reg_frame = pd.DataFrame(columns=["response", "predictor", "intercept", "slope", "r_squared", "n_obs"])
    else:
        if verbose:
            print(f"[regression] {fit}")
        reg_frame = fit.to_frame()

    return {
        "gdp": gdp,
        "gdp_by_continent": by_group,
        "regression": reg_frame,
    }


def save_results(results: Dict[str, pd.DataFrame], results_dir: str, *, write_parquet: bool = False, suffix: str = "") -> List[str]:
    """
    Write each result frame to `results_dir`. Returns the written paths.
    """
    os.makedirs(results_dir, exist_ok=True)
    written: List[str] = []
    for name, df in results.items():
        csv_path = os.path.join(results_dir, _with_suffix(f"{name}.csv", suffix))
        df.to_csv(csv_path, index=False)
        written.append(csv_path)
        if write_parquet:
            pq_path = os.path.join(results_dir, _with_suffix(f"{name}.parquet", suffix))
            df.to_parquet(pq_path, index=False)
            written.append(pq_path)
    return written


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Run the gapminder lesson steps and save the results.")
    parser.add_argument("--config", default=CONFIG_PATH, help="Path to a YAML config (default: %(default)s)")
    args = parser.parse_args(argv)

    cfg, PATHS = _load_config(ROOT_DIR, args.config)
    try:
        results = run_lesson(cfg, PATHS)
    except (UnreachableSourceError, ParseError) as e:
        print(f"[error] {e}")
        return 1

    out = cfg.get("output", {}) or {}
    written = save_results(
        results,
        PATHS["results_dir"],
        write_parquet=bool(out.get("write_parquet", False)),
        suffix=str(out.get("suffix", "") or ""),
    )
    print(f"[pipeline] Wrote {len(written)} file(s) to {PATHS['results_dir']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
