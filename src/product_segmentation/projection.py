import logging
from typing import Tuple

import pandas as pd
from sklearn.decomposition import PCA
from sklearn.preprocessing import PowerTransformer


# === PCA projection for checking the cluster cut ===
def project_2d(features: pd.DataFrame, random_state: int = 42) -> Tuple[pd.DataFrame, PCA]:
    """
    Yeo-Johnson transform, centre and scale every feature, then keep two principal components.

    The result is indexed by the same keys, in the same order, as ``features`` so it
    can be joined to the cluster labels directly. Constant columns carry no variance
    and are dropped before the transform.
    """
    numeric = features.select_dtypes(include='number')
    varying = numeric.loc[:, numeric.nunique() > 1]
    if len(varying) < 2 or varying.shape[1] < 2:
        raise ValueError(
            f"PCA needs at least two products and two non-constant features, got {varying.shape}"
        )

    transformer = PowerTransformer(method='yeo-johnson', standardize=True)
    scaled = transformer.fit_transform(varying.to_numpy(dtype=float))

    pca = PCA(n_components=2, svd_solver='full', random_state=random_state)
    coords = pca.fit_transform(scaled)

    projection = pd.DataFrame(coords, index=features.index, columns=['PCA1', 'PCA2'])
    logging.info(f"PCA explained variance ratio: {pca.explained_variance_ratio_.round(4).tolist()}")
    return projection, pca
