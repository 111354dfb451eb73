"""
Cold-start cohort selection.

The historical sales window is the first ``history_offset_days`` of the
point-of-sale data. Scoring-list products that never sold inside that window are
cold-start candidates; the ones that launched after it and have at least
``min_weeks`` weekly records form the training cohort for the downstream model.
"""

import logging
from typing import Set

import pandas as pd


class ColdStartOverlapError(RuntimeError):
    """Raised when a cold-start product also has historical sales."""


def history_cutoff(pos: pd.DataFrame, date_col: str, offset_days: int) -> pd.Timestamp:
    return pos[date_col].min() + pd.Timedelta(days=offset_days)


def historical_keys(pos: pd.DataFrame, key_col: str, date_col: str, cutoff: pd.Timestamp) -> Set[str]:
    """Products with sales dated before the cutoff."""
    return set(pos.loc[pos[date_col] < cutoff, key_col])


def cold_start_candidates(scoring_keys: pd.Index, history: Set[str]) -> pd.Index:
    keys = pd.Index(scoring_keys)
    return keys[~keys.isin(list(history))]


def check_disjoint(cohort_keys: pd.Index, history: Set[str]):
    overlap = sorted(set(cohort_keys) & history)
    if overlap:
        raise ColdStartOverlapError(
            f"{len(overlap)} cold-start products also have historical sales, e.g. {overlap[:5]}"
        )


def weekly_summary(pos: pd.DataFrame, key_col: str, date_col: str, sales_col: str,
                   season_col: str, weeks: int = 12) -> pd.DataFrame:
    """
    Per product: first sale date, number of weekly records, launch season and the
    cumulative sales of the first ``weeks`` weekly records.
    """
    weekly = (
        pos.groupby([key_col, date_col], as_index=False)
        .agg(**{sales_col: (sales_col, 'sum'), season_col: (season_col, 'first')})
        .sort_values([key_col, date_col])
    )
    grouped = weekly.groupby(key_col)

    summary = grouped.agg(
        first_sale=(date_col, 'min'),
        n_weeks=(date_col, 'size'),
        **{season_col: (season_col, 'first')},
    )
    summary[f'first_{weeks}_weeks_sales'] = grouped.head(weeks).groupby(key_col)[sales_col].sum()
    return summary


def select_cold_start_cohort(pos: pd.DataFrame, scoring_keys: pd.Index, key_col: str,
                             date_col: str, sales_col: str, season_col: str,
                             history_offset_days: int = 84, min_weeks: int = 12) -> pd.DataFrame:
    """
    Cold-start products with enough post-launch history to train on.

    Returns one row per product (indexed by key) with the launch season and the
    first ``min_weeks`` weeks of cumulative sales.
    """
    cutoff = history_cutoff(pos, date_col, history_offset_days)
    history = historical_keys(pos, key_col, date_col, cutoff)
    candidates = cold_start_candidates(scoring_keys, history)
    logging.info(
        f"History window ends {cutoff.date()}: {len(history)} historical products, "
        f"{len(candidates)} cold-start candidates"
    )

    summary = weekly_summary(pos[pos[key_col].isin(candidates)], key_col, date_col,
                             sales_col, season_col, weeks=min_weeks)
    cohort = summary[(summary['first_sale'] > cutoff) & (summary['n_weeks'] >= min_weeks)]
    check_disjoint(cohort.index, history)

    if cohort.empty:
        raise ValueError(
            f"No cold-start products launched after {cutoff.date()} with at least {min_weeks} weeks of sales"
        )
    logging.info(f"Cold-start cohort: {len(cohort)} products")
    return cohort.drop(columns=['first_sale', 'n_weeks'])


def build_training_table(cohort: pd.DataFrame, lags: pd.DataFrame, features: pd.DataFrame,
                         labels: pd.Series, key_col: str, season_col: str) -> pd.DataFrame:
    """
    Join the cohort with its launch-season bookings, the lagged bookings, the
    product features and the cluster label. Products without product info are dropped.
    """
    table = cohort.reset_index().merge(lags, on=[key_col, season_col], how='left')
    table[['bookings_total', 'bookings_lag']] = table[['bookings_total', 'bookings_lag']].fillna(0)

    attributes = features.join(labels).reset_index().rename(columns={'index': key_col})
    missing = set(table[key_col]) - set(attributes[key_col])
    if missing:
        logging.warning(f"{len(missing)} cold-start products have no product info and are dropped")

    table = table.merge(attributes, on=key_col, how='inner')
    if table.empty:
        raise ValueError("Cold-start training table is empty after joining product info")

    sales_cols = [col for col in cohort.columns if col.endswith('_weeks_sales')]
    leading = [key_col, season_col, 'bookings_total', 'bookings_lag'] + sales_cols
    return table[leading + [col for col in table.columns if col not in leading]]
