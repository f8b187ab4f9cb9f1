# src/data_loaders.py
import os
import glob
import yaml
import pandas as pd
import geopandas as gpd


def return_default_config():
    """
    Returns the default configuration dictionary
    """
    return {
        "paths": {
            "data_dir": "./data",
            "results_dir": "./results",
            "data_csv": "./data/tutorial.csv",
            "shapefile": "./data/shapes",
        },
        "diagnostics": {
            "verbose": True,
        },
        "maintenance": {"clean_run": False},
        "powers": {
            "exponents": [0, 0.5, 2, -1],
            "root_degrees": [2, 3],
            "demo_values": [1, 4, 9, 64, 729],
        },
        "pipeline": {
            "filter": {},
            "select": None,
            "group_by": ["group"],
            "summarise_col": "value",
            "agg": "mean",
            "power_col": "value",
            "power_exponent": 0.5,
        },
        "plots": {
            "x": "x", "y": "value", "hue": "group", "trend": True,
            "map_column": None, "k": 5, "scheme": "quantiles", "cmap": "viridis",
            "dpi": 150,
        },
        "filenames": {
            "chart": "layered_chart.png",
            "map": "map.png",
            "powers_table": "powers_table.csv",
            "summary_table": "group_summary.csv",
        },
    }

def _resolve(ROOT_DIR, p):
    """
    Resolve path p relative to ROOT_DIR if not absolute.
    """
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
        if not isinstance(user, dict):
            raise ValueError(f"[config] Expected a mapping at the top of {path}, got {type(user).__name__}")
        _deep_merge(cfg, user)
    else:
        print(f"[config] No config file at {path}; using built-in defaults.")

    PATHS = {k: _resolve(ROOT_DIR, cfg["paths"][k])
             for k in ("data_dir", "results_dir", "data_csv", "shapefile")}
    return cfg, PATHS

# ----------------------------- tabular data ------------------------------

def load_csv(path, required=None) -> pd.DataFrame:
    """
    Read a CSV into a DataFrame and check that `required` columns exist.

    Column names are stripped of surrounding whitespace so that headers such as
    ' value' still match.

    Raises
    ------
    FileNotFoundError
        If `path` does not exist.
    KeyError
        If any of `required` is missing.
    RuntimeError
        If pandas fails to parse the file.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"File not found: {path}")
    try:
        df = pd.read_csv(path)
    except Exception as e:
        raise RuntimeError(f"Failed to read {path}: {e}") from e
    df.columns = [str(c).strip() for c in df.columns]

    missing = [c for c in (required or []) if c not in df.columns]
    if missing:
        raise KeyError(f"Missing required columns in {path}: {missing}")
    return df

# ----------------------------- spatial data ------------------------------

def find_shapefile(root_dir) -> str:
    """
    Return the first .shp under root_dir (recursive, sorted for determinism).
    """
    shps = sorted(glob.glob(os.path.join(root_dir, "**", "*.shp"), recursive=True))
    if not shps:
        raise FileNotFoundError(f"No .shp found under {root_dir}")
    return shps[0]

def load_shapefile(path, target_crs=None) -> gpd.GeoDataFrame:
    """
    Load a shapefile (or the first one found in a directory) as a GeoDataFrame.

    Layers without a CRS are assumed to be EPSG:4326. If `target_crs` is given
    the layer is reprojected to it.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Shapefile not found: {path}")
    if os.path.isdir(path):
        path = find_shapefile(path)

    gdf = gpd.read_file(path)
    if gdf.crs is None:
        gdf = gdf.set_crs("EPSG:4326")
    if target_crs is not None:
        gdf = gdf.to_crs(target_crs)
    return gdf
