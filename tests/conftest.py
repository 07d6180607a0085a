import numpy as np
import pandas as pd
import pytest

from hemovec.embedding import EmbeddingTable
from hemovec.tokenizer import structure_names

AMINO_ACIDS = 'ACDEFGHIKLMNPQRSTVWY'


@pytest.fixture
def toy_table():
    """ 2-dim table for the tokens used in the worked examples.
    """
    return EmbeddingTable.from_mapping({
        'Ghelix': [1.0, 2.0],
        'Lhelix': [3.0, 4.0],
        'Kcoil': [5.0, 6.0],
        'Ksheet': [-1.0, 0.5],
    })


@pytest.fixture
def full_table():
    """ Random non-zero 8-dim vectors for every amino acid/structure token.
    """
    rng = np.random.RandomState(0)
    tokens = [aa + name for aa in AMINO_ACIDS for name in structure_names.values()]
    return EmbeddingTable(tokens, rng.uniform(0.1, 1.0, size=(len(tokens), 8)))


@pytest.fixture
def peptide_files(tmp_path):
    """ Writes a small pair of sequence/structure tables and returns their paths.
    """
    sequences = pd.DataFrame({
        'sequence': ['GLK', 'KLAKLAK', 'GIGKFLHSAK', 'FLPLIAS', 'WWKK', 'AAAA', 'CCCC', 'KWKLFKKI'],
        'label': [1, 1, 1, 0, 0, 0, 1, 0],
    })
    structures = pd.DataFrame({
        'sequence': ['KWKLFKKI', 'GLK', 'KLAKLAK', 'GIGKFLHSAK', 'FLPLIAS', 'WWKK', 'AAAA', 'CCCC', 'MMM'],
        'structure': ['CCHHHHCC', 'HHC', 'HHHHHHH', 'CCHHHHHHHC', 'CEEEEEC', 'CEEC', 'HHHH', 'CCCC', 'HHH'],
    })
    seq_file = tmp_path / 'sequences.csv'
    struct_file = tmp_path / 'structures.csv'
    sequences.to_csv(seq_file, index=False)
    structures.to_csv(struct_file, index=False)
    return str(seq_file), str(struct_file)
