import logging

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from scipy.cluster.hierarchy import dendrogram
from sklearn.decomposition import PCA


def plot_and_save_dendrogram(tree: np.ndarray, keys: pd.Index, cut_height: float,
                             path: str, truncate_p: int = 30):
    plt.figure(figsize=(12, 6))
    dendrogram(
        tree,
        labels=[str(key) for key in keys],
        truncate_mode='lastp',
        p=truncate_p,
        leaf_rotation=90.,
        leaf_font_size=8.,
        show_contracted=True,
    )
    plt.axhline(cut_height, color='red', linestyle='--', label='Cut')
    plt.title(f'Product Dendrogram (last {truncate_p} merges)')
    plt.ylabel('Merge height')
    plt.legend()
    plt.tight_layout()
    plt.savefig(path, dpi=200)
    plt.close()
    logging.info(f"Dendrogram saved: {path}")


def plot_and_save_projection(projection: pd.DataFrame, path: str):
    sns.set(style='whitegrid')
    plt.figure(figsize=(8, 6))
    sns.scatterplot(
        data=projection,
        x='PCA1', y='PCA2',
        hue='cluster',
        palette='tab10',
        s=80,
        edgecolor='k',
        legend='full'
    )
    plt.title('PCA Projection of Product Clusters')
    plt.tight_layout()
    plt.savefig(path, dpi=200)
    plt.close()
    logging.info(f"PCA cluster plot saved: {path}")


def plot_and_save_pca_variance(pca: PCA, path: str):
    plt.figure()
    plt.bar(['PC1', 'PC2'], pca.explained_variance_ratio_, color='skyblue')
    plt.title('PCA Variance Explained')
    plt.tight_layout()
    plt.savefig(path)
    plt.close()
    logging.info(f"PCA variance plot saved: {path}")
