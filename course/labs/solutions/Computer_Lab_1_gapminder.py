#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Computer Lab 1: Data frames, subsetting and functions with gapminder
# In-Class Version - Streamlined for teaching

# # Working with Tabular Data in Python
# ## Computer Lab 1: The gapminder data frame
# ---
#
# In this lab we load the gapminder data into a pandas DataFrame, look at its
# structure, pull out rows and columns, derive new columns with arithmetic,
# fit a straight line through two columns, and finally write our own
# reusable function with optional arguments.


# ### 1.1 Load the gapminder data

# ---- code cell ----
import sys
from pathlib import Path

import numpy as np
import pandas as pd

ROOT = Path(__file__).resolve().parents[3]
sys.path.insert(0, str(ROOT / "src"))

from data_loaders import load_gapminder, describe_table
from subsetting import (
    take_rows, take_columns, filter_rows, filter_in,
    bind_columns, bind_rows, add_derived_column,
)
from regression import fit_linear
from gdp import calc_gdp, gdp_by_group

gapminder = load_gapminder(ROOT / "data" / "gapminder_data.csv")

print(f"✓ Loaded gapminder: {len(gapminder):,} rows")
print(f"  Years: {gapminder['year'].min()} - {gapminder['year'].max()}")
print(f"  Countries: {gapminder['country'].nunique()}")


# ### 1.2 What does the table look like?

# ---- code cell ----
# The loader renames 'pop' -> 'population', 'gdpPercap' -> 'gdp_per_capita'
# and 'lifeExp' -> 'life_exp'
info = describe_table(gapminder)
print(f"{info['n_rows']} rows, {info['n_cols']} columns")
for col, dtype in info["dtypes"].items():
    print(f"  {col:<15} {dtype}")

print(gapminder.head())


# ### 2.1 Indexing: the first few rows, a few columns

# ---- code cell ----
# Python counts from 0 and the stop value is left out: rows 0, 1, 2
print(take_rows(gapminder, 0, 3))

# Same thing with pandas directly
print(gapminder.iloc[0:3])

# Pick columns by name
print(take_columns(gapminder, ["country", "year", "life_exp"]).head())


# ### 2.2 Subsetting with a condition

# ---- code cell ----
# Rows where life expectancy is above 80 years
print(filter_rows(gapminder, "life_exp", ">", 80))

# The pandas way: build a True/False mask, then index with it
mask = gapminder["life_exp"] > 80
print(gapminder[mask])


# ### 2.3 Subsetting by membership

# ---- code cell ----
oceania = filter_in(gapminder, "country", ["Australia", "New Zealand"])
print(oceania)

# .isin() is the pandas version of "is this value one of these?"
print(gapminder[gapminder["country"].isin(["Australia", "New Zealand"])])


# ### 3.1 New columns from old ones

# ---- code cell ----
# Elementwise arithmetic: every row gets its own value
pop_millions = gapminder["population"] / 1e6
with_millions = bind_columns(gapminder, pop_millions=pop_millions)
print(with_millions[["country", "year", "population", "pop_millions"]].head())

# Or let a function compute the column from the table
with_gdp = add_derived_column(
    gapminder, "gdp", lambda d: d["population"] * d["gdp_per_capita"]
)
print(with_gdp[["country", "year", "gdp"]].head())


# ### 3.2 Adding rows

# ---- code cell ----
# A new row must have the same columns as the table
new_row = pd.DataFrame([{
    "country": "Norway", "year": 2008, "population": 4700000,
    "continent": "Europe", "life_exp": 80.5, "gdp_per_capita": 50000.0,
}])
extended = bind_rows(gapminder, new_row)
print(f"Before: {len(gapminder)} rows, after: {len(extended)} rows")
print(f"The original table still has {len(gapminder)} rows")


# ### 4.1 Fitting a straight line

# ---- code cell ----
# How does life expectancy change with time?
fit = fit_linear(gapminder, response="life_exp", predictor="year")
print(fit)
print(f"Predicted life expectancy in 2012: {fit.predict(2012):.1f}")

# Is richer also longer-lived? Use log GDP per capita
logged = add_derived_column(gapminder, "log_gdp_per_capita", lambda d: np.log10(d["gdp_per_capita"]))
print(fit_linear(logged, response="life_exp", predictor="log_gdp_per_capita"))


# ### 5.1 Writing our own function

# ---- code cell ----
# calc_gdp takes the table plus two optional filters. Leaving a filter out
# (or passing an empty list) means "don't filter on that column".
all_rows = calc_gdp(gapminder)
print(all_rows[["country", "year", "gdp"]].head())

# Only 2007
print(calc_gdp(gapminder, year=2007)[["country", "year", "gdp"]])

# Only Australia, every year
print(calc_gdp(gapminder, country="Australia")[["country", "year", "gdp"]])

# Both at once
print(calc_gdp(gapminder, year=[1952, 2007], country=["Australia", "Afghanistan"]))

# The table we passed in was not changed
print("gdp" in gapminder.columns)  # False


# ### 5.2 (Optional) Totals per continent

# ---- code cell ----
print(gdp_by_group(gapminder, by="continent", year=2007))
