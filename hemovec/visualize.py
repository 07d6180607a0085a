"""
Figures for inspecting the learned token embedding: a UMAP projection of
the token vectors, a clustered cosine-similarity heatmap of the tokens and
the embedding matrix of a single peptide.
"""


import os

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
import umap
from sklearn.metrics.pairwise import cosine_similarity

from hemovec import utils
from hemovec.tokenizer import structure_names

structure_colors = {
    'helix': 'red',
    'sheet': 'blue',
    'coil': 'grey'
}


def structure_of(token):
    """ Returns the structure label a token ends with, or None.
    """
    for name in structure_names.values():
        if token.endswith(name):
            return name
    return None


def project_umap(table, n_neighbors=15, min_dist=0.1, seed=42, init='spectral'):
    """ 2D UMAP coordinates of every token vector, in table order.
    """
    reducer = umap.UMAP(n_components=2, n_neighbors=min(n_neighbors, len(table) - 1), min_dist=min_dist,
                        metric='cosine', random_state=seed, init=init)
    return reducer.fit_transform(table.vectors)


def plot_umap(table, filename, coords=None, **kwargs):
    if coords is None:
        coords = project_umap(table, **kwargs)

    plt.figure(figsize=(10, 8))
    labels = [structure_of(t) for t in table.tokens]
    for name, color in structure_colors.items():
        mask = np.array([label == name for label in labels])
        if mask.any():
            plt.scatter(coords[mask, 0], coords[mask, 1], c=color, label=name, s=30, alpha=.7)
    for (x, y), token in zip(coords, table.tokens):
        plt.annotate(token[0], (x, y), fontsize=7)
    plt.title('UMAP of residue/structure token embeddings')
    plt.xlabel('UMAP 1')
    plt.ylabel('UMAP 2')
    plt.legend()
    plt.tight_layout()
    plt.savefig(filename, format='png', dpi=150)
    plt.close()
    return coords


def plot_similarity_clustermap(table, filename):
    """ Hierarchically clustered heatmap of token-token cosine similarity.
    """
    similarity = pd.DataFrame(cosine_similarity(table.vectors), index=table.tokens, columns=table.tokens)
    grid = sns.clustermap(similarity, cmap='vlag', vmin=-1, vmax=1, figsize=(12, 12),
                          xticklabels=True, yticklabels=True)
    grid.savefig(filename, dpi=150)
    plt.close(grid.fig)
    return similarity


def plot_peptide_matrix(matrix, tokens, filename, title=None):
    """ Heatmap of one assembled peptide matrix, padding rows included.
    """
    if hasattr(matrix, 'toarray'):
        matrix = matrix.toarray()
    ylabels = list(tokens) + [''] * (matrix.shape[0] - len(tokens))

    plt.figure(figsize=(12, 10))
    ax = sns.heatmap(matrix, cmap='viridis', center=0, yticklabels=ylabels)
    ax.set_xlabel('embedding dimension')
    ax.set_ylabel('token position')
    if title:
        ax.set_title(title)
    plt.tight_layout()
    plt.savefig(filename, format='png', dpi=150)
    plt.close()


def run(table, dirname, seed=42, example=None):
    """ Draws the token figures and, given (matrix, tokens, name), one peptide matrix.
    """
    utils.ensure_dir(dirname)
    print('Drawing the embedding of ' + str(len(table)) + ' tokens to ' + dirname + '...')
    plot_umap(table, os.path.join(dirname, 'umap_tokens.png'), seed=seed)
    plot_similarity_clustermap(table, os.path.join(dirname, 'token_similarity.png'))
    if example is not None:
        matrix, tokens, name = example
        plot_peptide_matrix(matrix, tokens, os.path.join(dirname, 'peptide_matrix.png'), title=name)
