# ------------------------------------------------------------------------------
# Lab 1 walkthrough driver.
# - Power/root demo table from powers.exponents / powers.root_degrees.
# - Optional tabular step: load CSV -> filter -> select -> power column ->
#   group summary, plus a layered chart.
# - Optional spatial step: load a shapefile (file or folder) and draw a map
#   (outline or choropleth of plots.map_column).
# - Missing inputs are skipped with a message; all outputs go to results_dir.
# ------------------------------------------------------------------------------


from __future__ import annotations
from typing import Optional, Dict, List
import os
import argparse
import shutil

from powers import make_power
from data_loaders import _load_config, load_csv, load_shapefile
from helpers import _coerce_list, _coerce_float_list, _coerce_bool
from transforms import (
    filter_rows, select_columns, summarise_by_group, add_power_column,
    run_pipeline, power_table,
)
from figures_static import plot_layered, plot_shapefile, save_figure

# ------------------------------- Config loading -------------------------------
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def _powers_step(cfg: dict, paths: dict, verbose: bool) -> str:
    pw = cfg.get("powers", {})
    exponents = _coerce_float_list(pw.get("exponents")) or []
    degrees = _coerce_float_list(pw.get("root_degrees")) or []
    values = _coerce_float_list(pw.get("demo_values")) or []

    table = power_table(exponents, values, root_degrees=degrees)
    out = os.path.join(paths["results_dir"], cfg["filenames"]["powers_table"])
    table.to_csv(out, index=False)
    if verbose:
        print(f"[powers] {len(exponents)} exponent(s), {len(degrees)} root degree(s) "
              f"over {len(values)} value(s) -> {out}")
    return out


def _tabular_step(cfg: dict, paths: dict, verbose: bool) -> Dict[str, str]:
    csv_path = paths["data_csv"]
    if not os.path.exists(csv_path):
        print(f"[data] No CSV found (expected at {csv_path}); skipping tabular step.")
        return {}

    pipe = cfg.get("pipeline", {})
    plots = cfg.get("plots", {})
    df = load_csv(csv_path)
    if verbose:
        print(f"[data] Loaded {csv_path}: {df.shape[0]} rows x {df.shape[1]} columns.")

    selected = _coerce_list(pipe.get("select"))
    steps = [
        (filter_rows, {"conditions": pipe.get("filter") or {}}),
        (select_columns, {"columns": selected}),
    ]
    power_col = pipe.get("power_col")
    if power_col and (power_col in df.columns) and (selected is None or power_col in selected):
        steps.append((add_power_column, {
            "column": power_col,
            "fn": make_power(float(pipe.get("power_exponent", 0.5))),
        }))
    elif power_col:
        print(f"[pipeline] Column {power_col!r} not present; skipping power column.")
    work = run_pipeline(df, steps)
    if verbose:
        print(f"[pipeline] {len(steps)} step(s) -> {work.shape[0]} rows; columns: {list(work.columns)}")

    out: Dict[str, str] = {}
    by = _coerce_list(pipe.get("group_by"))
    value_col = pipe.get("summarise_col")
    missing = [c for c in (by or []) + [value_col] if c not in work.columns] if value_col else []
    if by and value_col and missing:
        print(f"[pipeline] Columns {missing} not present; skipping group summary.")
    elif by and value_col:
        summary = summarise_by_group(work, by, value_col, agg=pipe.get("agg", "mean"))
        out["summary"] = os.path.join(paths["results_dir"], cfg["filenames"]["summary_table"])
        summary.to_csv(out["summary"], index=False)
        if verbose:
            print(f"[pipeline] group summary ({len(summary)} groups) -> {out['summary']}")

    x, y = plots.get("x"), plots.get("y")
    if x in work.columns and y in work.columns:
        hue = plots.get("hue") if plots.get("hue") in work.columns else None
        fig, _ = plot_layered(work, x, y, hue=hue, trend=_coerce_bool(plots.get("trend"), True),
                              title=f"{y} by {x}")
        out["chart"] = save_figure(fig, os.path.join(paths["results_dir"], cfg["filenames"]["chart"]),
                                   dpi=int(plots.get("dpi", 150)))
        if verbose:
            print(f"[figures] layered chart -> {out['chart']}")
    else:
        print(f"[figures] Columns {x!r}/{y!r} not both present; skipping chart.")
    return out


def _map_step(cfg: dict, paths: dict, verbose: bool) -> Optional[str]:
    shp = paths["shapefile"]
    if not os.path.exists(shp):
        print(f"[map] No shapefile found (expected at {shp}); skipping map.")
        return None
    plots = cfg.get("plots", {})
    gdf = load_shapefile(shp)
    if verbose:
        print(f"[map] Loaded {len(gdf)} feature(s); crs={gdf.crs}")
    fig, _ = plot_shapefile(
        gdf,
        column=plots.get("map_column"),
        k=int(plots.get("k", 5)),
        scheme=plots.get("scheme", "quantiles"),
        cmap=plots.get("cmap", "viridis"),
    )
    out = save_figure(fig, os.path.join(paths["results_dir"], cfg["filenames"]["map"]),
                      dpi=int(plots.get("dpi", 150)))
    if verbose:
        print(f"[map] -> {out}")
    return out


def run_walkthrough(cfg: dict, paths: dict) -> Dict[str, str]:
    """
    Run every lab step and return {artefact: path} for what was produced.
    """
    if _coerce_bool(cfg.get("maintenance", {}).get("clean_run"), False) and os.path.isdir(paths["results_dir"]):
        shutil.rmtree(paths["results_dir"])
        print(f"[maintenance] Removed results_dir: {paths['results_dir']}")
    os.makedirs(paths["results_dir"], exist_ok=True)
    verbose = _coerce_bool(cfg.get("diagnostics", {}).get("verbose"), True)

    artefacts: Dict[str, str] = {"powers": _powers_step(cfg, paths, verbose)}
    artefacts.update(_tabular_step(cfg, paths, verbose))
    map_path = _map_step(cfg, paths, verbose)
    if map_path:
        artefacts["map"] = map_path

    print(f"[output] {len(artefacts)} artefact(s) saved in {paths['results_dir']}")
    return artefacts


def main(argv: Optional[List[str]] = None) -> Dict[str, str]:
    parser = argparse.ArgumentParser(description="Run the Lab 1 walkthrough.")
    parser.add_argument("--root", default=ROOT_DIR, help="Base directory for relative paths.")
    parser.add_argument("--config", default=None, help="YAML config (default: <root>/config.yaml).")
    args = parser.parse_args(argv)

    root = os.path.abspath(args.root)
    cfg, paths = _load_config(root, args.config or os.path.join(root, "config.yaml"))
    return run_walkthrough(cfg, paths)


if __name__ == "__main__":
    main()
