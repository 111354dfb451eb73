import logging
from typing import Dict, Optional

import numpy as np
import pandas as pd
from scipy.cluster.hierarchy import cut_tree, linkage
from scipy.spatial.distance import pdist

# Linkages whose merge heights never decrease, so a cut at K groups is well defined.
MONOTONE_LINKAGES = ('single', 'complete', 'average', 'weighted', 'ward')


class HierarchicalClusterer:
    """
    Agglomerative clustering of the product feature table.

    The distance matrix is computed with ``scipy.spatial.distance.pdist`` and
    released once the linkage is built. ``cut`` severs the tree where exactly K
    groups remain and numbers them 1..K.
    """

    def __init__(self, method: str = 'average', metric: str = 'euclidean'):
        if method not in MONOTONE_LINKAGES:
            raise ValueError(f"Unsupported linkage '{method}', expected one of {MONOTONE_LINKAGES}")
        if method == 'ward' and metric != 'euclidean':
            raise ValueError("Ward linkage requires Euclidean metric.")
        self.method = method
        self.metric = metric
        self.tree: Optional[np.ndarray] = None
        self.keys: Optional[pd.Index] = None

    def fit(self, features: pd.DataFrame) -> 'HierarchicalClusterer':
        numeric = features.select_dtypes(include='number')
        if numeric.empty or numeric.shape[1] == 0:
            raise ValueError("Cannot compute distances: the feature table is empty")
        if len(numeric) < 2:
            raise ValueError(f"Need at least two products to cluster, got {len(numeric)}")

        X = numeric.to_numpy(dtype=float)
        if not np.isfinite(X).all():
            raise ValueError("Cannot compute distances: feature table contains NaN or infinite values")

        distances = pdist(X, metric=self.metric)
        self.tree = linkage(distances, method=self.method)
        del distances

        self.keys = numeric.index.copy()
        logging.info(f"Linkage built ({self.method}, {self.metric}) over {len(self.keys)} products")
        return self

    def _check_fitted(self):
        if self.tree is None:
            raise RuntimeError("HierarchicalClusterer.fit must be called before cutting the tree")

    def cut(self, n_clusters: int) -> pd.Series:
        """Flat labels 1..n_clusters per product key, numbered by first appearance."""
        self._check_fitted()
        n_leaves = len(self.keys)
        if not 1 <= n_clusters <= n_leaves:
            raise ValueError(f"n_clusters must be between 1 and {n_leaves}, got {n_clusters}")

        raw = cut_tree(self.tree, n_clusters=n_clusters).ravel()
        codes, _ = pd.factorize(raw)
        labels = pd.Series(codes + 1, index=self.keys, name='cluster')

        if labels.nunique() != n_clusters:
            raise RuntimeError(f"Tree cut produced {labels.nunique()} clusters instead of {n_clusters}")
        logging.info(f"Cluster sizes: {labels.value_counts().sort_index().to_dict()}")
        return labels

    def cut_height(self, n_clusters: int) -> float:
        """Height between the last kept merge and the first severed one."""
        self._check_fitted()
        heights = self.tree[:, 2]
        if n_clusters <= 1:
            return float(heights[-1]) * 1.05
        if n_clusters >= len(self.keys):
            return 0.0
        return float(heights[-n_clusters] + heights[-(n_clusters - 1)]) / 2


def remap_labels(labels: pd.Series, remap: Dict[int, int]) -> pd.Series:
    """Merge clusters after the fact, e.g. {5: 3} folds cluster 5 into cluster 3."""
    if not remap:
        return labels
    unknown = sorted(set(remap) - set(labels.unique()))
    if unknown:
        raise ValueError(f"Cluster remap refers to unknown labels: {unknown}")

    remapped = labels.map(lambda label: remap.get(label, label))
    logging.info(f"Clusters remapped with {remap}: {remapped.nunique()} clusters remain")
    return remapped


def profile_clusters(features: pd.DataFrame, labels: pd.Series) -> pd.DataFrame:
    """Product count and mean feature value per cluster."""
    profile = features.groupby(labels).mean()
    profile.insert(0, 'Count', labels.value_counts().sort_index())
    profile.index.name = labels.name
    return profile.reset_index()
