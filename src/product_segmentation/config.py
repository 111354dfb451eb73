"""Run configuration for the product segmentation pipeline."""


# === Configuration (can be replaced by YAML/JSON in real projects) ===
class Config:
    data_dir = 'data'
    output_dir = 'outputs'

    # Input files
    pos_file = 'pos.csv'
    scoring_file = 'scoring_list.csv'
    bookings_file = 'bookings.csv'
    product_info_file = 'product_info.csv'

    # Output files
    training_file = 'cold_start_training.csv'
    predictions_file = 'predictions.csv'
    profiles_file = 'cluster_profiles.csv'
    projection_file = 'cluster_projection.csv'
    dendrogram_plot = 'dendrogram.png'
    projection_plot = 'pca_clusters.png'
    pca_variance_plot = 'pca_variance.png'

    # Column names
    key_col = 'style_display_code'
    date_col = 'activity_date'
    sales_col = 'net_sales_units'
    season_col = 'season'
    bookings_col = 'bookings_qty'
    attribute_cols = [
        'age_segment',
        'gender_segment',
        'color_family',
        'technology',
        'category',
        'product_family',
    ]
    design_col = 'design_code'

    # Clustering. n_clusters comes from reading the dendrogram and the PCA plot;
    # cluster_remap merges clusters that turned out redundant, e.g. {5: 3}.
    linkage_method = 'average'
    distance_metric = 'euclidean'
    n_clusters = 5
    cluster_remap = {}
    random_state = 42

    # Cold start cohort
    history_offset_days = 84
    min_weeks = 12

    # Zero-sales rule. Years default to the last year in the POS data and the one before.
    prior_year = None
    current_year = None
    target_seasons = ('SS18', 'FW18')

    # Explicit season ordering; when None it is parsed from the codes.
    season_order = None

    # Unresolved in the source data: bookings may be recorded against the season
    # they are placed in or the season they deliver in. We read them as the latter.
    booking_assumption = (
        'bookings are attributed to the season they are booked FOR (delivery season), '
        'not the season in which the order was placed'
    )
