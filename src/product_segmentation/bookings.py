"""
Booking aggregations keyed by product and season.

Season codes look like ``SS17`` or ``FW17``: a selling-period prefix followed by a
two or four digit year. They are ordered by year, then by period within the year.
"""

import re
import logging
from typing import Iterable, List, Optional, Set

import pandas as pd

_SEASON_PATTERN = re.compile(r'^([A-Za-z]+)(\d{2}|\d{4})$')

# Position of each selling period within its year
_PERIOD_RANK = {
    'SP': 0, 'SS': 0,
    'SU': 1,
    'FA': 2, 'FW': 2, 'AW': 2,
    'HO': 3,
}


def season_sort_key(code: str):
    match = _SEASON_PATTERN.match(str(code).strip())
    if not match or match.group(1).upper() not in _PERIOD_RANK:
        return None
    year = int(match.group(2))
    if year < 100:
        year += 2000
    return year, _PERIOD_RANK[match.group(1).upper()], code


def resolve_season_order(codes: Iterable[str], explicit: Optional[List[str]] = None) -> List[str]:
    """
    Chronological order of the given season codes.

    An explicit order wins and must cover every code; otherwise codes are parsed,
    falling back to lexical order when any code does not follow the usual pattern.
    """
    seen = sorted({str(code) for code in codes if pd.notna(code)})

    if explicit is not None:
        unknown = [code for code in seen if code not in explicit]
        if unknown:
            raise ValueError(f"Season codes missing from the configured season order: {unknown}")
        return list(explicit)

    keys = [season_sort_key(code) for code in seen]
    if any(key is None for key in keys):
        logging.warning("Unrecognised season codes, falling back to lexical season order")
        return seen
    return [key[2] for key in sorted(keys)]


def booked_keys(bookings: pd.DataFrame, key_col: str, season_col: str,
                seasons: Iterable[str]) -> Set[str]:
    """Products with at least one booking row in any of ``seasons``."""
    mask = bookings[season_col].isin(list(seasons))
    return set(bookings.loc[mask, key_col])


def booking_totals(bookings: pd.DataFrame, key_col: str, season_col: str,
                   qty_col: str, season_order: List[str]) -> pd.DataFrame:
    """Wide table of booking totals: one row per product, one column per season."""
    if bookings.empty:
        return pd.DataFrame(0, index=pd.Index([], name=key_col), columns=season_order)
    wide = bookings.pivot_table(index=key_col, columns=season_col, values=qty_col,
                                aggfunc='sum', fill_value=0)
    return wide.reindex(columns=season_order, fill_value=0)


def season_booking_totals(bookings: pd.DataFrame, key_col: str, season_col: str,
                          qty_col: str, seasons: Iterable[str]) -> pd.DataFrame:
    """Booking totals for the given seasons as ``bookings_<season>`` columns."""
    seasons = list(seasons)
    subset = bookings[bookings[season_col].isin(seasons)]
    wide = booking_totals(subset, key_col, season_col, qty_col, seasons)
    wide.columns = [f'bookings_{season}' for season in seasons]
    wide.columns.name = None
    return wide


def lagged_bookings(bookings: pd.DataFrame, key_col: str, season_col: str,
                    qty_col: str, season_order: List[str]) -> pd.DataFrame:
    """
    Booking total per product and season next to the total of the preceding season.

    The preceding season follows ``season_order``; the first season and seasons
    whose predecessor has no bookings get a lag of 0. Every product appears with
    every season so products without bookings in their launch season still pick up
    the previous season's total.
    """
    wide = booking_totals(bookings, key_col, season_col, qty_col, season_order)
    lag = wide.shift(1, axis=1, fill_value=0)

    def to_long(table: pd.DataFrame, value_name: str) -> pd.DataFrame:
        long = table.rename_axis(index=key_col, columns=season_col).reset_index()
        return long.melt(id_vars=key_col, var_name=season_col, value_name=value_name)

    result = to_long(wide, 'bookings_total').merge(
        to_long(lag, 'bookings_lag'), on=[key_col, season_col], how='left'
    )
    result[season_col] = result[season_col].astype(str)
    return result
