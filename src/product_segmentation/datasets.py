import os
import logging
from typing import Dict, List, Optional, Tuple

import pandas as pd

from .config import Config


def require_columns(df: pd.DataFrame, columns: List[str], table: str):
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise KeyError(f"Expected column(s) {missing} not found in {table} table")


def read_table(filepath: str, columns: List[str], table: str,
               dtype: Optional[Dict[str, type]] = None) -> pd.DataFrame:
    """Read a CSV input, check its columns and refuse empty tables."""
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"File not found: {filepath}")

    logging.info(f"Loading {table} data from {filepath} ...")
    df = pd.read_csv(filepath, dtype=dtype)
    require_columns(df, columns, table)

    if df.empty:
        raise ValueError(f"The {table} table is empty: {filepath}")
    logging.info(f"{table} data shape: {df.shape}")
    return df


# === Input tables ===
def load_pos(filepath: str, config: Config) -> pd.DataFrame:
    columns = [config.key_col, config.date_col, config.sales_col, config.season_col]
    df = read_table(filepath, columns, 'point-of-sale',
                    dtype={config.key_col: str, config.season_col: str})

    df = df.dropna(subset=[config.key_col])
    df[config.date_col] = pd.to_datetime(df[config.date_col], errors='raise')
    df[config.sales_col] = pd.to_numeric(df[config.sales_col], errors='raise')
    return df


def load_scoring_list(filepath: str, config: Config) -> pd.DataFrame:
    df = read_table(filepath, [config.key_col], 'scoring list', dtype={config.key_col: str})
    df = df.dropna(subset=[config.key_col]).drop_duplicates(subset=[config.key_col])
    logging.info(f"Products to score: {len(df)}")
    return df[[config.key_col]].reset_index(drop=True)


def load_bookings(filepath: str, config: Config) -> pd.DataFrame:
    columns = [config.key_col, config.season_col, config.bookings_col]
    df = read_table(filepath, columns, 'bookings',
                    dtype={config.key_col: str, config.season_col: str})

    df = df.dropna(subset=[config.key_col, config.season_col])
    df[config.bookings_col] = pd.to_numeric(df[config.bookings_col], errors='raise').fillna(0)
    return df


def load_product_info(filepath: str, config: Config) -> pd.DataFrame:
    columns = [config.key_col] + list(config.attribute_cols)
    df = read_table(filepath, columns, 'product info', dtype={config.key_col: str})
    return df.dropna(subset=[config.key_col])


def load_inputs(config: Config) -> Tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame, pd.DataFrame]:
    """Load point-of-sale, scoring list, bookings and product info tables."""
    pos = load_pos(os.path.join(config.data_dir, config.pos_file), config)
    scoring = load_scoring_list(os.path.join(config.data_dir, config.scoring_file), config)
    bookings = load_bookings(os.path.join(config.data_dir, config.bookings_file), config)
    products = load_product_info(os.path.join(config.data_dir, config.product_info_file), config)
    return pos, scoring, bookings, products


# === Exports ===
def export_table(df: pd.DataFrame, path: str) -> str:
    df.to_csv(path, index=False)
    logging.info(f"Exported {df.shape[0]} rows x {df.shape[1]} columns: {path}")
    return path


def read_export(path: str, config: Config) -> pd.DataFrame:
    """Read an exported table back with the key and season columns kept as strings."""
    return pd.read_csv(path, dtype={config.key_col: str, config.season_col: str})
