import pandas as pd
import pytest

from product_segmentation.features import aggregate_features
from product_segmentation.projection import project_2d

from conftest import ATTRIBUTES


def test_projection_keeps_key_order(random_features):
    shuffled = random_features.sample(frac=1, random_state=1)
    projection, pca = project_2d(shuffled)

    assert list(projection.index) == list(shuffled.index)
    assert list(projection.columns) == ['PCA1', 'PCA2']
    assert len(pca.explained_variance_ratio_) == 2


def test_projection_is_deterministic(random_features):
    first, _ = project_2d(random_features)
    second, _ = project_2d(random_features)

    pd.testing.assert_frame_equal(first, second)


def test_projection_of_indicator_features(products):
    features = aggregate_features(products, 'style_display_code', ATTRIBUTES, drop_cols=['design_code'])
    projection, _ = project_2d(features)

    assert projection.notna().all().all()
    assert len(projection) == len(features)


def test_projection_needs_two_varying_features(random_features):
    features = random_features[['f0']].assign(constant=1.0)
    with pytest.raises(ValueError):
        project_2d(features)
