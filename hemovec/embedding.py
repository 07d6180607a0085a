"""
Read-only token -> vector lookup table built from a trained skip-gram model.

The table is created once, before any worker starts assembling matrices,
and is never written to afterwards.
"""


import numpy as np
import pandas as pd

from hemovec.errors import DataIntegrityError


class EmbeddingTable(object):

    def __init__(self, tokens, vectors):
        vectors = np.array(vectors, dtype='float32')
        tokens = tuple(tokens)
        if vectors.ndim != 2 or vectors.shape[0] != len(tokens):
            raise DataIntegrityError('embedding table needs one vector per token, got '
                                     + str(len(tokens)) + ' tokens and vectors of shape ' + str(vectors.shape))
        if len(set(tokens)) != len(tokens):
            raise DataIntegrityError('embedding table has duplicated tokens')
        vectors.flags.writeable = False
        self._tokens = tokens
        self._vectors = vectors
        self._index = dict((token, i) for i, token in enumerate(tokens))

    @classmethod
    def from_mapping(cls, mapping):
        tokens = list(mapping.keys())
        return cls(tokens, [mapping[t] for t in tokens])

    @classmethod
    def from_word2vec(cls, model):
        """ Builds the table from a gensim Word2Vec model or its KeyedVectors.
        """
        wv = getattr(model, 'wv', model)
        return cls(list(wv.index_to_key), wv.vectors)

    @classmethod
    def from_csv(cls, fname):
        df = pd.read_csv(fname, header=0, keep_default_na=False)
        if 'token' not in df.columns:
            raise DataIntegrityError(str(fname) + ' is missing column: token')
        return cls(list(df['token']), df.drop(columns=['token']).to_numpy(dtype='float32'))

    def to_csv(self, fname):
        df = pd.DataFrame(self._vectors, columns=['dim_' + str(i) for i in range(self.dim)])
        df.insert(0, 'token', list(self._tokens))
        df.to_csv(fname, index=False)

    @property
    def tokens(self):
        return self._tokens

    @property
    def vectors(self):
        return self._vectors

    @property
    def dim(self):
        return self._vectors.shape[1]

    def __contains__(self, token):
        return token in self._index

    def __getitem__(self, token):
        return self._vectors[self._index[token]]

    def __len__(self):
        return len(self._tokens)

    def __repr__(self):
        return 'EmbeddingTable(tokens=%d, dim=%d)' % (len(self), self.dim)
