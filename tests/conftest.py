import os

import numpy as np
import pandas as pd
import pytest

from product_segmentation.config import Config

START = pd.Timestamp('2016-01-04')
LAUNCH = pd.Timestamp('2016-08-01')

ATTRIBUTES = ['age_segment', 'gender_segment', 'color_family', 'technology', 'category', 'product_family']

PRODUCT_ROWS = [
    ('P01', 'Adult', 'Men', 'Black', 'Dri', 'Shoes', 'Running', 'D001'),
    ('P02', 'Adult', 'Men', 'Black', 'Dri', 'Shoes', 'Running', 'D002'),
    ('P03', 'Adult', 'Women', 'White', 'Air', 'Shoes', 'Lifestyle', 'D003'),
    ('N01', 'Kids', 'Boys', 'Red', 'Dri', 'Apparel', 'Football', 'D004'),
    ('N01', 'Kids', 'Boys', 'Blue', 'Dri', 'Apparel', 'Football', 'D005'),
    ('N02', 'Kids', 'Girls', 'Blue', 'Dri', 'Apparel', 'Football', 'D006'),
    ('N03', 'Adult', 'Women', 'White', 'Air', 'Shoes', 'Lifestyle', 'D007'),
    ('N04', 'Kids', 'Boys', 'Red', 'Dri', 'Apparel', 'Football', 'D008'),
    ('N05', 'Adult', 'Men', 'Black', 'Air', 'Apparel', 'Training', 'D009'),
    ('S01', 'Adult', 'Women', 'Green', 'Air', 'Accessories', 'Training', 'D010'),
]


def season_of(date: pd.Timestamp) -> str:
    return f"{'SS' if date.month <= 6 else 'FW'}{date.year % 100:02d}"


def weekly_rows(key: str, start: pd.Timestamp, weeks: int, units: float):
    dates = pd.date_range(start, periods=weeks, freq='7D')
    return [(key, date, units, season_of(date)) for date in dates]


@pytest.fixture
def pos():
    rows = []
    rows += weekly_rows('P01', START, 104, 5)
    rows += weekly_rows('P02', START, 30, 3)
    rows += weekly_rows('P03', START, 30, 3)
    for i in range(1, 5):
        rows += weekly_rows(f'N0{i}', LAUNCH, 20, i)
    rows += weekly_rows('N05', LAUNCH, 5, 2)
    return pd.DataFrame(rows, columns=['style_display_code', 'activity_date', 'net_sales_units', 'season'])


@pytest.fixture
def bookings():
    rows = [
        ('P01', 'SS16', 40), ('P01', 'FW16', 50), ('P01', 'SS17', 60),
        ('P03', 'SS18', 5),
    ]
    for i in range(1, 5):
        rows += [(f'N0{i}', 'SS16', 10 * i), (f'N0{i}', 'FW16', 20 * i)]
    return pd.DataFrame(rows, columns=['style_display_code', 'season', 'bookings_qty'])


@pytest.fixture
def scoring():
    keys = ['P02', 'P03', 'N01', 'N02', 'N03', 'N04', 'N05', 'S01']
    return pd.DataFrame({'style_display_code': keys})


@pytest.fixture
def products():
    return pd.DataFrame(PRODUCT_ROWS, columns=['style_display_code'] + ATTRIBUTES + ['design_code'])


@pytest.fixture
def random_features():
    rng = np.random.default_rng(0)
    keys = [f'K{i:02d}' for i in range(20)]
    return pd.DataFrame(rng.random((20, 5)), index=pd.Index(keys, name='style_display_code'),
                        columns=[f'f{i}' for i in range(5)])


@pytest.fixture
def config(tmp_path, pos, bookings, scoring, products):
    data_dir = tmp_path / 'data'
    data_dir.mkdir()
    pos.to_csv(data_dir / Config.pos_file, index=False)
    bookings.to_csv(data_dir / Config.bookings_file, index=False)
    scoring.to_csv(data_dir / Config.scoring_file, index=False)
    products.to_csv(data_dir / Config.product_info_file, index=False)

    cfg = Config()
    cfg.data_dir = str(data_dir)
    cfg.output_dir = os.path.join(str(tmp_path), 'outputs')
    cfg.n_clusters = 3
    cfg.cluster_remap = {}
    return cfg
