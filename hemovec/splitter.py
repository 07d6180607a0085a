"""
Seeded train/test split of the assembled peptides.
"""


import numpy as np


def split_indices(n, fraction=0.8, seed=42):
    """ Random permutation of [0, n); the first floor(fraction * n) indices
        are the training set, the rest the test set.
    """
    if n < 0:
        raise ValueError('n must be non-negative, got ' + str(n))
    if not 0.0 < fraction <= 1.0:
        raise ValueError('fraction must be in (0, 1], got ' + str(fraction))
    order = np.random.RandomState(seed).permutation(n)
    n_train = int(np.floor(fraction * n))
    return order[:n_train], order[n_train:]


def split_dataset(X, y, fraction=0.8, seed=42):
    """ Splits features and labels with the same indices.
    """
    y = np.asarray(y)
    if len(X) != len(y):
        raise ValueError('got ' + str(len(X)) + ' matrices but ' + str(len(y)) + ' labels')
    train_idx, test_idx = split_indices(len(y), fraction, seed)

    datasets = {}
    datasets['X_train'] = X[train_idx]
    datasets['Y_train'] = y[train_idx]
    datasets['X_test'] = X[test_idx]
    datasets['Y_test'] = y[test_idx]
    datasets['idx_train'] = train_idx
    datasets['idx_test'] = test_idx
    return datasets
