import pandas as pd
import pytest

from product_segmentation.bookings import (
    booking_totals,
    lagged_bookings,
    resolve_season_order,
    season_booking_totals,
)

KEY, SEASON, QTY = 'style_display_code', 'season', 'bookings_qty'


def test_lag_is_previous_season_total():
    bookings = pd.DataFrame({KEY: ['X', 'X', 'X'], SEASON: ['A', 'B', 'C'], QTY: [10, 20, 30]})
    lags = lagged_bookings(bookings, KEY, SEASON, QTY, ['A', 'B', 'C']).set_index(SEASON)

    assert lags.loc['C', 'bookings_lag'] == 20
    assert lags.loc['B', 'bookings_lag'] == 10
    assert lags.loc['A', 'bookings_lag'] == 0
    assert lags.loc['C', 'bookings_total'] == 30


def test_lag_follows_season_order_not_row_order():
    bookings = pd.DataFrame({KEY: ['X', 'X', 'X'], SEASON: ['C', 'A', 'B'], QTY: [30, 10, 20]})
    lags = lagged_bookings(bookings, KEY, SEASON, QTY, ['A', 'B', 'C']).set_index(SEASON)

    assert lags.loc['C', 'bookings_lag'] == 20


def test_lag_covers_seasons_without_bookings():
    bookings = pd.DataFrame({KEY: ['X', 'Y'], SEASON: ['A', 'A'], QTY: [10, 4]})
    lags = lagged_bookings(bookings, KEY, SEASON, QTY, ['A', 'B']).set_index([KEY, SEASON])

    assert lags.loc[('X', 'B'), 'bookings_total'] == 0
    assert lags.loc[('X', 'B'), 'bookings_lag'] == 10
    assert lags.loc[('Y', 'B'), 'bookings_lag'] == 4


def test_booking_totals_sum_duplicate_rows():
    bookings = pd.DataFrame({KEY: ['X', 'X'], SEASON: ['A', 'A'], QTY: [3, 4]})
    totals = booking_totals(bookings, KEY, SEASON, QTY, ['A', 'B'])

    assert totals.loc['X', 'A'] == 7
    assert totals.loc['X', 'B'] == 0


def test_season_booking_totals_always_has_each_season(bookings):
    totals = season_booking_totals(bookings, KEY, SEASON, QTY, ['SS18', 'FW18'])

    assert list(totals.columns) == ['bookings_SS18', 'bookings_FW18']
    assert totals.loc['P03', 'bookings_SS18'] == 5
    assert totals.loc['P03', 'bookings_FW18'] == 0


def test_season_booking_totals_without_matching_rows(bookings):
    totals = season_booking_totals(bookings, KEY, SEASON, QTY, ['SS30'])

    assert list(totals.columns) == ['bookings_SS30']
    assert totals.empty


def test_parsed_season_order():
    order = resolve_season_order(['FW17', 'SS17', 'FW16', 'SS16', 'SS17'])

    assert order == ['SS16', 'FW16', 'SS17', 'FW17']


def test_four_digit_years_and_holiday_periods():
    assert resolve_season_order(['HO2017', 'SU2017', 'SP2018']) == ['SU2017', 'HO2017', 'SP2018']


def test_unparseable_codes_fall_back_to_lexical_order():
    assert resolve_season_order(['B', 'A', 'C']) == ['A', 'B', 'C']


def test_explicit_order_wins():
    assert resolve_season_order(['A', 'C'], explicit=['C', 'B', 'A']) == ['C', 'B', 'A']


def test_explicit_order_must_cover_all_codes():
    with pytest.raises(ValueError):
        resolve_season_order(['A', 'D'], explicit=['A', 'B'])
