import os
import logging
from typing import Tuple

import pandas as pd

from .bookings import booked_keys, lagged_bookings, resolve_season_order, season_booking_totals
from .clustering import HierarchicalClusterer, profile_clusters, remap_labels
from .cold_start import build_training_table, select_cold_start_cohort
from .config import Config
from .datasets import export_table, load_inputs
from .features import aggregate_features
from .heuristics import predict_zero_sales, resolve_years, yearly_sales
from .plots import plot_and_save_dendrogram, plot_and_save_pca_variance, plot_and_save_projection
from .projection import project_2d


# === Utility functions ===
def ensure_dir(directory: str):
    if not os.path.exists(directory):
        os.makedirs(directory)
        logging.info(f"Created directory: {directory}")


# === Zero-sales rule ===
def zero_sales_predictions(pos: pd.DataFrame, bookings: pd.DataFrame,
                           scoring_keys: pd.Index, config: Config) -> pd.Series:
    prior_year, current_year = resolve_years(pos, config.date_col, config.prior_year, config.current_year)
    yearly = yearly_sales(pos, config.key_col, config.date_col, config.sales_col)
    booked = booked_keys(bookings, config.key_col, config.season_col, config.target_seasons)
    return predict_zero_sales(scoring_keys, yearly, booked, prior_year, current_year)


# === Clustering with visual checks ===
def cluster_products(features: pd.DataFrame, config: Config) -> pd.Series:
    clusterer = HierarchicalClusterer(method=config.linkage_method, metric=config.distance_metric)
    clusterer.fit(features)

    labels = clusterer.cut(config.n_clusters)
    plot_and_save_dendrogram(
        clusterer.tree,
        clusterer.keys,
        clusterer.cut_height(config.n_clusters),
        os.path.join(config.output_dir, config.dendrogram_plot)
    )
    return remap_labels(labels, config.cluster_remap)


def validate_clusters(features: pd.DataFrame, labels: pd.Series, config: Config) -> pd.DataFrame:
    projection, pca = project_2d(features, random_state=config.random_state)
    projection['cluster'] = labels

    plot_and_save_pca_variance(pca, os.path.join(config.output_dir, config.pca_variance_plot))
    plot_and_save_projection(projection, os.path.join(config.output_dir, config.projection_plot))
    return projection


# === Output tables ===
def build_predictions_table(scoring_keys: pd.Index, features: pd.DataFrame,
                            season_bookings: pd.DataFrame, prediction: pd.Series,
                            config: Config) -> pd.DataFrame:
    table = pd.DataFrame(index=pd.Index(scoring_keys, name=config.key_col))
    table = table.join(features).join(season_bookings)
    table[season_bookings.columns] = table[season_bookings.columns].fillna(0)
    table['prediction'] = prediction
    return table.reset_index()


# === Main pipeline function ===
def run_pipeline(config: Config) -> Tuple[pd.DataFrame, pd.DataFrame]:
    ensure_dir(config.output_dir)
    logging.info(f"Booking assumption: {config.booking_assumption}")

    # Load inputs
    pos, scoring, bookings, products = load_inputs(config)
    scoring_keys = pd.Index(scoring[config.key_col])

    # Heuristic zero-sales rule
    prediction = zero_sales_predictions(pos, bookings, scoring_keys, config)

    # Categorical features, one row per product
    features = aggregate_features(products, config.key_col, config.attribute_cols,
                                  drop_cols=[config.design_col])

    # Hierarchical clustering, cut at the configured K
    labels = cluster_products(features, config)

    # PCA projection to check the cut
    projection = validate_clusters(features, labels, config)
    export_table(projection.reset_index(), os.path.join(config.output_dir, config.projection_file))
    export_table(profile_clusters(features, labels), os.path.join(config.output_dir, config.profiles_file))

    # Cold-start cohort with booking features
    season_order = resolve_season_order(
        pd.concat([bookings[config.season_col], pos[config.season_col]]),
        config.season_order
    )
    cohort = select_cold_start_cohort(
        pos, scoring_keys, config.key_col, config.date_col, config.sales_col, config.season_col,
        history_offset_days=config.history_offset_days, min_weeks=config.min_weeks
    )
    lags = lagged_bookings(bookings, config.key_col, config.season_col, config.bookings_col, season_order)
    training = build_training_table(cohort, lags, features, labels, config.key_col, config.season_col)

    season_bookings = season_booking_totals(bookings, config.key_col, config.season_col,
                                            config.bookings_col, config.target_seasons)
    predictions = build_predictions_table(scoring_keys, features, season_bookings, prediction, config)

    # Export results
    export_table(training, os.path.join(config.output_dir, config.training_file))
    predictions_csv = export_table(predictions, os.path.join(config.output_dir, config.predictions_file))
    logging.info(f"Pipeline complete. Predictions saved to: {predictions_csv}")

    return training, predictions
