import numpy as np
import pytest

from hemovec import splitter


@pytest.mark.parametrize('n', [0, 1, 7, 10, 133, 1001])
def test_split_covers_every_index_once(n):
    train, test = splitter.split_indices(n, 0.8, seed=3)
    assert len(train) == int(np.floor(0.8 * n))
    assert sorted(np.concatenate([train, test]).tolist()) == list(range(n))
    assert len(set(train) & set(test)) == 0


def test_split_is_reproducible():
    first = splitter.split_indices(50, 0.8, seed=7)
    second = splitter.split_indices(50, 0.8, seed=7)
    np.testing.assert_array_equal(first[0], second[0])
    np.testing.assert_array_equal(first[1], second[1])


def test_different_seed_gives_different_split():
    first, _ = splitter.split_indices(50, 0.8, seed=7)
    second, _ = splitter.split_indices(50, 0.8, seed=8)
    assert list(first) != list(second)


def test_bad_fraction_is_rejected():
    with pytest.raises(ValueError):
        splitter.split_indices(10, 0.0)
    with pytest.raises(ValueError):
        splitter.split_indices(10, 1.5)


def test_split_dataset_keeps_matrices_and_labels_aligned():
    X = np.arange(10, dtype='float32').reshape((10, 1, 1))
    y = np.arange(10)
    datasets = splitter.split_dataset(X, y, 0.8, seed=1)
    assert len(datasets['X_train']) == 8
    assert len(datasets['X_test']) == 2
    np.testing.assert_array_equal(datasets['X_train'][:, 0, 0], datasets['Y_train'])
    np.testing.assert_array_equal(datasets['X_test'][:, 0, 0], datasets['Y_test'])
    np.testing.assert_array_equal(datasets['Y_test'], datasets['idx_test'])


def test_split_dataset_rejects_misaligned_labels():
    with pytest.raises(ValueError):
        splitter.split_dataset(np.zeros((3, 2, 2)), [0, 1])
