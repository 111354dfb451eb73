import logging
from typing import Iterable, List

import pandas as pd


# === Categorical feature aggregation ===
def aggregate_features(products: pd.DataFrame, key_col: str, attribute_cols: List[str],
                       drop_cols: Iterable[str] = ()) -> pd.DataFrame:
    """
    One-hot encode the categorical attributes and average the indicators per product.

    Every value observed in an attribute column becomes a column named
    ``<attribute>_<value>``. A product with several records gets the share of its
    records carrying each value, so all features lie in [0, 1]. Columns outside
    ``attribute_cols`` are ignored; ``drop_cols`` (the high-cardinality design code)
    is removed before anything else.

    Returns a frame indexed by product key, one row per distinct key.
    """
    if key_col not in products.columns:
        raise KeyError(f"Expected column '{key_col}' not found in product table")
    missing = [col for col in attribute_cols if col not in products.columns]
    if missing:
        raise KeyError(f"Expected attribute column(s) {missing} not found in product table")

    df = products.drop(columns=[col for col in drop_cols if col in products.columns])
    df = df.dropna(subset=[key_col])[[key_col] + list(attribute_cols)]

    encoded = pd.get_dummies(df, columns=list(attribute_cols), prefix_sep='_', dtype=float)
    features = encoded.groupby(key_col).mean().sort_index()

    logging.info(f"Feature table built: {features.shape[0]} products x {features.shape[1]} features")
    return features
