import os
import logging
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
import mapclassify as mc
import matplotlib.colors as mcolors
import matplotlib.patches as mpatches


SCHEMES = {
    "quantiles": mc.Quantiles,
    "equal_interval": mc.EqualInterval,
    "natural_breaks": mc.NaturalBreaks,
    "pretty": mc.PrettyBreaks,
}


def _new_ax(ax, figsize):
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure
    return fig, ax


def plot_layered(df, x, y, hue=None, trend=True, title=None, ax=None):
    """
    Build a chart layer by layer: points, then an optional linear trend, then labels.

    Returns (fig, ax).
    """
    need = [c for c in (x, y, hue) if c is not None]
    miss = [c for c in need if c not in df.columns]
    if miss:
        raise KeyError(f"Missing columns for plot: {miss}")

    fig, ax = _new_ax(ax, (7, 5))

    # ─── layer 1: points ────────────────────────────────────────────────────────
    sns.scatterplot(data=df, x=x, y=y, hue=hue, ax=ax, s=40, edgecolor='k', alpha=0.8)

    # ─── layer 2: trend over all points ─────────────────────────────────────────
    if trend and len(df) >= 2:
        sns.regplot(data=df, x=x, y=y, ax=ax, scatter=False, ci=None,
                    color="#B80C09", line_kws={"linewidth": 1.5, "linestyle": "--"})

    # ─── layer 3: labels / theme ────────────────────────────────────────────────
    ax.set_xlabel(x)
    ax.set_ylabel(y)
    if title:
        ax.set_title(title, loc='left', fontweight='bold')
    ax.grid(which='major', linestyle='--', alpha=0.2)
    sns.despine(ax=ax)
    return fig, ax


def classify_values(values, k=5, scheme="quantiles"):
    """
    Upper bin edges for a choropleth using mapclassify.

    Non-finite values are dropped. Empty or constant input gives a single bin.
    """
    if scheme not in SCHEMES:
        raise ValueError(f"scheme must be one of {sorted(SCHEMES)}, got: {scheme!r}")
    vals = np.asarray(values, dtype=float)
    finite = vals[np.isfinite(vals)]
    if finite.size < vals.size:
        logging.warning(f"[classify_values] dropped {vals.size - finite.size} non-finite value(s)")
    if finite.size == 0:
        return [0.0]
    if np.nanmax(finite) - np.nanmin(finite) < 1e-12:
        return [float(finite[0])]
    k = max(1, min(int(k), np.unique(finite).size))
    bins = SCHEMES[scheme](finite, k=k).bins
    return np.unique(np.asarray(bins, dtype=float)).tolist()


def plot_shapefile(gdf, column=None, k=5, scheme="quantiles", cmap="viridis", title=None, ax=None):
    """
    Draw a GeoDataFrame: outlines only, or a classed choropleth of `column`.

    Returns (fig, ax).
    """
    if column is not None and column not in gdf.columns:
        raise KeyError(f"Column {column!r} not in layer (have {list(gdf.columns)})")

    fig, ax = _new_ax(ax, (7, 7))

    if column is None:
        gdf.boundary.plot(ax=ax, color="#333333", linewidth=0.6)
    else:
        vals = pd.to_numeric(gdf[column], errors="coerce").to_numpy(dtype=float)
        bins = classify_values(vals, k=k, scheme=scheme)
        edges = np.asarray(bins, dtype=float)
        klass = np.where(np.isfinite(vals),
                         np.minimum(np.searchsorted(edges, vals, side="left"), len(edges) - 1), -1)
        colors = plt.get_cmap(cmap, max(len(edges), 1))

        missing = mcolors.to_rgba("#dddddd")
        facecolors = np.array([colors(int(c)) if c >= 0 else missing for c in klass])
        gdf.plot(ax=ax, color=facecolors, edgecolor="white", linewidth=0.5)

        finite = vals[np.isfinite(vals)]
        lows = ([float(finite.min())] if finite.size else [float(edges[0])]) + edges[:-1].tolist()
        handles = [
            mpatches.Patch(facecolor=colors(i), edgecolor='k', label=f"{lo:,.2f} – {hi:,.2f}")
            for i, (lo, hi) in enumerate(zip(lows, edges))
        ]
        ax.legend(handles=handles, title=column, loc='lower left', frameon=True, edgecolor='k')

    ax.set_axis_off()
    if title:
        ax.set_title(title, loc='left', fontweight='bold')
    return fig, ax


def save_figure(fig, path, dpi=150):
    """Save `fig` to `path` (creating the folder) and close it."""
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    return path
