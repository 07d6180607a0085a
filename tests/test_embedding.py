import os
import pickle

import numpy as np
import pandas as pd
import pytest

from hemovec import Hemo_Vec
from hemovec.embedding import EmbeddingTable
from hemovec import tokenizer
from hemovec.errors import BatchAssemblyError, DataIntegrityError, UnknownStructureCode, UnknownToken


def test_table_lookup(toy_table):
    assert toy_table.dim == 2
    assert len(toy_table) == 4
    assert 'Ghelix' in toy_table
    assert 'Gsheet' not in toy_table
    np.testing.assert_array_equal(toy_table['Kcoil'], [5, 6])


def test_table_is_read_only(toy_table):
    with pytest.raises(ValueError):
        toy_table['Ghelix'][0] = 10.0
    with pytest.raises(ValueError):
        toy_table.vectors[1, 1] = 10.0


def test_table_rejects_shape_mismatch():
    with pytest.raises(DataIntegrityError):
        EmbeddingTable(['Ghelix', 'Kcoil'], np.zeros((3, 2)))
    with pytest.raises(DataIntegrityError):
        EmbeddingTable(['Ghelix', 'Ghelix'], np.ones((2, 2)))


def test_table_csv_round_trip(tmp_path, full_table):
    fname = str(tmp_path / 'embedding_table.csv')
    full_table.to_csv(fname)
    loaded = EmbeddingTable.from_csv(fname)
    assert loaded.tokens == full_table.tokens
    np.testing.assert_allclose(loaded.vectors, full_table.vectors, rtol=1e-6)


def test_errors_survive_pickling():
    error = pickle.loads(pickle.dumps(UnknownToken('Xcoil', 'AXK')))
    assert isinstance(error, UnknownToken)
    assert error.token == 'Xcoil'
    assert error.sequence_id == 'AXK'
    assert str(error) == str(UnknownToken('Xcoil', 'AXK'))


def test_train_embedding_on_sentences():
    sentences = [['Ghelix', 'Lhelix', 'Kcoil', 'Ksheet'], ['Kcoil', 'Ghelix', 'Lhelix']] * 20
    model = Hemo_Vec.train_embedding(sentences, dim=6, window=2, min_count=1, epochs=2)
    table = EmbeddingTable.from_word2vec(model)
    assert table.dim == 6
    assert set(table.tokens) == {'Ghelix', 'Lhelix', 'Kcoil', 'Ksheet'}
    np.testing.assert_array_equal(table['Kcoil'], model.wv['Kcoil'])


def test_run_writes_corpus_model_and_table(tmp_path, peptide_files):
    dirnames = {
        'sequences': peptide_files[0],
        'structures': peptide_files[1],
        'corpus': str(tmp_path / 'corpus' / 'sentences.txt'),
        'HemoVec_embedding': str(tmp_path / 'embedding'),
    }
    params = {'min_count': '1', 'vec_dim': '5', 'window_size': '3', 'sg_model': 'True',
              'iter': '2', 'workers': '1', 'seed': '42'}
    table = Hemo_Vec.run(params, dirnames)
    assert table.dim == 5
    assert os.path.exists(os.path.join(dirnames['HemoVec_embedding'], Hemo_Vec.MODEL_NAME))
    with open(dirnames['corpus']) as f:
        assert len(f.read().splitlines()) == 8

    loaded = Hemo_Vec.load_table(dirnames)
    assert loaded.tokens == table.tokens


def bad_structure_run(tmp_path):
    """ Tables where the second peptide carries an unknown structure code.
    """
    seq_file = tmp_path / 'sequences.csv'
    struct_file = tmp_path / 'structures.csv'
    pd.DataFrame({'sequence': ['GLK', 'KK', 'WWA'], 'label': [1, 0, 0]}).to_csv(seq_file, index=False)
    pd.DataFrame({'sequence': ['GLK', 'KK', 'WWA'], 'structure': ['HHC', 'HT', 'EEC']}).to_csv(struct_file,
                                                                                            index=False)
    dirnames = {
        'sequences': str(seq_file),
        'structures': str(struct_file),
        'corpus': str(tmp_path / 'sentences.txt'),
        'HemoVec_embedding': str(tmp_path / 'embedding'),
    }
    params = {'min_count': '1', 'vec_dim': '4', 'window_size': '2', 'sg_model': 'True',
              'iter': '1', 'workers': '1', 'seed': '42'}
    return params, dirnames


def test_run_fails_on_bad_peptide_at_its_input_position(tmp_path):
    params, dirnames = bad_structure_run(tmp_path)
    with pytest.raises(BatchAssemblyError) as err:
        Hemo_Vec.run(params, dirnames)
    assert len(err.value.failures) == 1
    assert err.value.failures[0].position == 1
    assert err.value.failures[0].sequence_id == 'KK'
    assert isinstance(err.value.failures[0].error, UnknownStructureCode)
    assert not os.path.exists(dirnames['corpus'])


def test_run_skips_bad_peptide_when_asked(tmp_path):
    params, dirnames = bad_structure_run(tmp_path)
    table = Hemo_Vec.run(params, dirnames, skip_invalid=True)
    sentences = tokenizer.read_corpus(dirnames['corpus'])
    assert sorted(sentences) == [['Ghelix', 'Lhelix', 'Kcoil'], ['Wsheet', 'Wsheet', 'Acoil']]
    assert set(table.tokens) == {'Ghelix', 'Lhelix', 'Kcoil', 'Wsheet', 'Acoil'}
