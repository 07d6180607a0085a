"""
This script performs the task of finding a distributed representation
of residue/structure tokens using the skip-gram model
"""


from gensim.models import Word2Vec
import numpy as np
import os

from hemovec import records
from hemovec import tokenizer
from hemovec import utils
from hemovec.embedding import EmbeddingTable

MODEL_NAME = 'HemoVec_Object'
TABLE_NAME = 'embedding_table.csv'


def train_embedding(sentences, dim=100, window=5, min_count=1, sg=True, epochs=10, workers=1, seed=1):
    """ Trains a Word2Vec model on the token sentences.
    """
    return Word2Vec(sentences, min_count=min_count, vector_size=dim, window=window, sg=int(sg),
                    epochs=epochs, workers=workers, seed=seed, batch_words=100)


def run(params, dirnames, skip_invalid=False):
    """ Learns the HemoVec distributed representation and saves the model and
        its lookup table for later use with HemoCNN.

        Peptides that cannot be tokenized abort the run, or are left out of
        the corpus when skip_invalid is set.
    """
    min_count = int(params['min_count'])
    dim = int(params['vec_dim'])
    window = int(params['window_size'])

    print('Distributed representation will be learned based on vector dim: ' + str(dim) + ', context window: ' + str(window) + '.')
    peptides = records.load_records(dirnames['sequences'], dirnames['structures'])

    _, token_lists = tokenizer.tokenize_peptides(peptides, skip_invalid)

    # simple shuffling of sentences, fixed by the seed
    seed = int(params['seed'])
    order = np.random.RandomState(seed).permutation(len(token_lists))
    sentences = [token_lists[i] for i in order]

    corpus_dir = os.path.dirname(dirnames['corpus'])
    if corpus_dir:
        utils.ensure_dir(corpus_dir)
    tokenizer.write_corpus(sentences, dirnames['corpus'])
    print('There are ' + str(len(sentences)) + ' peptide sentences written to ' + dirnames['corpus'] + '...')

    # train from the corpus as written
    sentences = tokenizer.read_corpus(dirnames['corpus'])
    model = train_embedding(sentences, dim=dim, window=window, min_count=min_count,
                            sg=utils.str2bool(params['sg_model']), epochs=int(params['iter']),
                            workers=int(params['workers']), seed=seed)

    utils.ensure_dir(dirnames['HemoVec_embedding'])
    model.save(os.path.join(dirnames['HemoVec_embedding'], MODEL_NAME))
    table = EmbeddingTable.from_word2vec(model)
    table.to_csv(os.path.join(dirnames['HemoVec_embedding'], TABLE_NAME))
    print('Learned ' + str(len(table)) + ' token vectors.')
    return table


def load_table(dirnames):
    """ Loads the lookup table of a previous run, from the CSV if present or
        else from the saved model.
    """
    table_file = os.path.join(dirnames['HemoVec_embedding'], TABLE_NAME)
    if os.path.exists(table_file):
        return EmbeddingTable.from_csv(table_file)
    model = Word2Vec.load(os.path.join(dirnames['HemoVec_embedding'], MODEL_NAME))
    return EmbeddingTable.from_word2vec(model)
