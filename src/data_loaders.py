# src/data_loaders.py
import os
import urllib.error
import yaml
import pyreadr
import pandas as pd


class UnreachableSourceError(OSError):
    """The data source (local file or URL) could not be opened."""


class ParseError(ValueError):
    """The data source was reached but did not hold a readable table."""


# raw gapminder header -> canonical lesson name
COLUMN_ALIASES = {
    "pop": "population",
    "gdpPercap": "gdp_per_capita",
    "gdp-per-capita": "gdp_per_capita",
    "lifeExp": "life_exp",
}


def return_default_config():
    """
    Returns the default configuration dictionary
    """
    return {
        "paths": {
            "data_dir": "./data",
            "results_dir": "./results",
            "gapminder_csv": "./data/gapminder_data.csv",
        },
        "diagnostics": {
            "verbose": True,
        },
        "columns": dict(COLUMN_ALIASES),
        "filters": {
            "year": [],
            "country": [],
        },
        "grouping": {
            "by": ["continent"],
        },
        "regression": {
            "response": "life_exp",
            "predictor": "year",
        },
        "output": {
            "write_parquet": False,
            "suffix": "",
        },
    }


def _is_remote(p) -> bool:
    return str(p).lower().startswith(("http://", "https://"))


def _resolve(ROOT_DIR, p):
    """
    Resolve path p relative to ROOT_DIR if not absolute. URLs are returned as-is.
    """
    if _is_remote(p):
        return p
    return os.path.abspath(os.path.join(ROOT_DIR, p))


def _deep_merge(dst, src):
    """
    Recursively merge src into dst
    """
    for k, v in src.items():
        if isinstance(v, dict) and isinstance(dst.get(k), dict):
            _deep_merge(dst[k], v)
        else:
            dst[k] = v


def _load_config(ROOT_DIR: str, path: str):
    """
    Load YAML config if present; otherwise use defaults for both config and paths.
    Returns (cfg, PATHS)
    """
    cfg = return_default_config()
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as fh:
            user = yaml.safe_load(fh) or {}
        _deep_merge(cfg, user)
    else:
        print(f"[config] No config file at {path}; using built-in defaults.")

    PATHS = {
        "data_dir": _resolve(ROOT_DIR, cfg["paths"]["data_dir"]),
        "results_dir": _resolve(ROOT_DIR, cfg["paths"]["results_dir"]),
        "gapminder_csv": _resolve(ROOT_DIR, cfg["paths"]["gapminder_csv"]),
    }
    return cfg, PATHS


# ------------------------------- table loading --------------------------------

def normalize_columns(df: pd.DataFrame, aliases: dict = None) -> pd.DataFrame:
    """
    Strip header whitespace and rename raw gapminder headers to canonical names.

    Matching is exact first, then case-insensitive (so 'GDPPERCAP' still maps
    to 'gdp_per_capita'). Columns that already carry a canonical name are left
    alone. Returns a new frame.
    """
    aliases = COLUMN_ALIASES if aliases is None else aliases
    out = df.copy()
    out.columns = [str(c).strip() for c in out.columns]
    low = {c.lower(): c for c in out.columns}
    rename = {}
    for raw, canon in aliases.items():
        if canon in out.columns or canon in rename.values():
            continue
        col = raw if raw in out.columns else low.get(raw.lower())
        if col is not None and col not in rename:
            rename[col] = canon
    return out.rename(columns=rename)


def read_rds_file(file_path: str) -> pd.DataFrame:
    """
    Reads an RDS file and returns its contents as a pandas DataFrame.
    """
    try:
        result = pyreadr.read_r(file_path)
    except Exception as e:
        raise UnreachableSourceError(f"Failed to read {file_path}: {e}") from e
    df = result[None]
    if not isinstance(df, pd.DataFrame):
        raise ParseError(f"{file_path} does not hold a data frame")
    return df


def _read_csv_source(source) -> pd.DataFrame:
    try:
        return pd.read_csv(source)
    except (OSError, urllib.error.URLError) as e:
        raise UnreachableSourceError(f"Cannot reach {source}: {e}") from e
    except pd.errors.EmptyDataError as e:
        raise ParseError(f"{source} is empty: {e}") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise ParseError(f"Failed to parse {source}: {e}") from e


def load_gapminder(source, aliases: dict = None, verbose: bool = False) -> pd.DataFrame:
    """
    Load the gapminder table from a local path or a URL.

    `.rds` files go through pyreadr, everything else through pandas.read_csv.
    Headers are normalized to canonical names (see COLUMN_ALIASES).

    Raises
    ------
    UnreachableSourceError
        Missing file, unreachable URL or unreadable RDS.
    ParseError
        Empty or malformed input.
    """
    src = str(source)
    remote = _is_remote(src)
    if not remote and not os.path.exists(src):
        raise UnreachableSourceError(f"File not found: {src}")
    if src.lower().endswith(".rds"):
        if remote:
            raise UnreachableSourceError(f"RDS sources must be local files: {src}")
        df = read_rds_file(src)
    else:
        df = _read_csv_source(src)
    if df.shape[1] == 0:
        raise ParseError(f"{src} has no columns")
    df = normalize_columns(df, aliases)
    if verbose:
        print(f"[data] Loaded {len(df):,} rows x {df.shape[1]} columns from {src}")
    return df


def describe_table(df: pd.DataFrame) -> dict:
    """
    Structural summary of a table: row/column counts, column names,
    dtypes and missing-value counts per column.
    """
    return {
        "n_rows": int(df.shape[0]),
        "n_cols": int(df.shape[1]),
        "columns": [str(c) for c in df.columns],
        "dtypes": {str(c): str(t) for c, t in df.dtypes.items()},
        "n_missing": {str(c): int(n) for c, n in df.isna().sum().items()},
    }
