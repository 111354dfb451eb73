import logging
from typing import Optional, Set, Tuple

import numpy as np
import pandas as pd

# Prediction value for products the zero-sales rule does not decide
UNRESOLVED = np.nan


def resolve_years(pos: pd.DataFrame, date_col: str, prior_year: Optional[int] = None,
                  current_year: Optional[int] = None) -> Tuple[int, int]:
    """Default to the last calendar year in the data and the year before it."""
    if current_year is None:
        current_year = int(pos[date_col].dt.year.max())
    if prior_year is None:
        prior_year = current_year - 1
    return prior_year, current_year


def yearly_sales(pos: pd.DataFrame, key_col: str, date_col: str, sales_col: str) -> pd.DataFrame:
    """Net units per product and calendar year; one column per year, 0 where nothing sold."""
    df = pos.assign(year=pos[date_col].dt.year)
    return df.pivot_table(index=key_col, columns='year', values=sales_col,
                          aggfunc='sum', fill_value=0)


def predict_zero_sales(scoring_keys: pd.Index, yearly: pd.DataFrame, booked: Set[str],
                       prior_year: int, current_year: int) -> pd.Series:
    """
    Low-hanging-fruit rule: predict 0 future sales for products that sold in the
    prior year, sold nothing in the current year and have no bookings in the target
    seasons. Every other product is left as ``UNRESOLVED``.
    """
    for year in (prior_year, current_year):
        if year not in yearly.columns:
            raise ValueError(f"No sales recorded for {year}; available years: {list(yearly.columns)}")

    keys = pd.Index(scoring_keys)
    prior = yearly[prior_year].reindex(keys, fill_value=0)
    current = yearly[current_year].reindex(keys, fill_value=0)
    not_booked = ~keys.isin(list(booked))

    is_zero = (prior.to_numpy() > 0) & (current.to_numpy() == 0) & not_booked
    prediction = pd.Series(np.where(is_zero, 0.0, UNRESOLVED), index=keys, name='prediction')

    logging.info(
        f"Zero-sales rule ({prior_year} -> {current_year}): "
        f"{int(is_zero.sum())} of {len(keys)} products predicted 0"
    )
    return prediction
