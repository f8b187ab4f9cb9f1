#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Computer Lab 1: Data frames, pipelines and a first map
# In-Class Version - Streamlined for teaching

# # Working with Data and Maps in Python
# ## Computer Lab 1: Vectors, data frames, pipelines, layered charts and shapefiles
# ---
#
# Section 1 is live coded. Section 2 (the map) can be finished as a class
# homework if we run out of time.

# ---- code cell ----
import sys
from pathlib import Path

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import geopandas as gpd
from shapely.geometry import box

# Add src directory to path
src_path = Path(__file__).resolve().parents[3] / 'src'
sys.path.insert(0, str(src_path))

from powers import make_power, make_root, DomainError
from helpers import as_numeric_vector, as_character_vector
from transforms import filter_rows, select_columns, summarise_by_group, add_power_column, run_pipeline
from figures_static import plot_layered, plot_shapefile


# ## 1. Section 1
# ---

# ### 1.1 Vectors
# A pandas Series is our "vector": one column of values that all share a type.

# ---- code cell ----
ages = pd.Series([23, 35, 41, 58, 62])
print(ages.mean())        # 43.8
print(ages[ages > 40])    # boolean indexing

# Mixing types in a plain list does NOT give you numbers...
mixed = [1, "2", 3.5]
print(pd.Series(mixed).dtype)   # object

# ...so we convert explicitly. A bad value raises instead of being silently
# turned into text.
print(as_numeric_vector(mixed))
print(as_character_vector(mixed))
try:
    as_numeric_vector([1, "two", 3])
except ValueError as e:
    print(f"Refused: {e}")


# ### 1.2 Functions that make functions
# `make_power(p)` remembers `p` and hands back a function of the base only.

# ---- code cell ----
square_root = make_power(0.5)
cube_root = make_root(3)

print(square_root(9))     # 3.0
print(cube_root(64))      # 4.0
print(cube_root(729))     # 9.0
print(cube_root.exponent) # the remembered exponent: 0.333...

# Works on whole vectors too
print(square_root(ages))

# Undefined real results come back as nan, not an error
print(square_root(-4))    # nan

# A zero-th root is meaningless
try:
    make_root(0)
except DomainError as e:
    print(f"DomainError: {e}")


# ### 1.3 Data frames and indexing

# ---- code cell ----
rng = np.random.default_rng(382)
df = pd.DataFrame({
    'region': np.repeat(['North', 'South', 'East', 'West'], 25),
    'x': np.tile(np.arange(25), 4),
})
df['value'] = 10 + 2.5 * df['x'] + rng.normal(0, 4, size=len(df))
df['value'] = df['value'].clip(lower=0)

df.head()
df.loc[df['region'] == 'North', ['x', 'value']].head()   # label-based
df.iloc[:3, :2]                                           # position-based


# ### 1.4 Pipelines: filter -> select -> mutate -> summarise

# ---- code cell ----
tidy = run_pipeline(df, [
    (filter_rows, {'conditions': {'region': ['North', 'South']}}),
    (select_columns, {'columns': ['region', 'x', 'value']}),
    (add_power_column, {'column': 'value', 'fn': square_root}),
])
tidy.head()

summary = summarise_by_group(tidy, 'region', 'value_pow0.5', agg='mean')
print(summary)


# ### 1.5 Layered charts
# Points first, then a trend line, then labels. Each call adds one layer.

# ---- code cell ----
fig, ax = plot_layered(tidy, x='x', y='value', hue='region', title='Value by x')
plt.show()


# ## 2. Section 2: A first map
# ---
# We build a tiny grid of polygons, save it as a shapefile and read it back,
# exactly as you would with a downloaded boundary file.

# ---- code cell ----
cells = [box(i, j, i + 1, j + 1) for i in range(4) for j in range(3)]
grid = gpd.GeoDataFrame(
    {'cell': [f"c{k}" for k in range(len(cells))], 'score': np.linspace(1, 12, len(cells))},
    geometry=cells,
    crs="EPSG:4326",
)
out_dir = Path.cwd() / 'lab1_shapes'
out_dir.mkdir(exist_ok=True)
grid.to_file(out_dir / 'grid.shp')

shapes = gpd.read_file(out_dir / 'grid.shp')
print(shapes.crs, len(shapes))

# ---- code cell ----
fig, ax = plot_shapefile(shapes, title='Outlines')
fig, ax = plot_shapefile(shapes, column='score', k=4, title='Score (quantiles)')
plt.show()
