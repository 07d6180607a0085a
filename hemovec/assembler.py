"""
Assembles one max_len x dim embedding matrix per peptide.

Row i holds the vector of the i-th token, rows past the end of the peptide
are zero. Matrices are kept sparse while they are built and only densified
when stacked into the feature array handed to the classifier.
"""


import multiprocessing as mp
from functools import partial

import numpy as np
from scipy import sparse

from hemovec.errors import BatchAssemblyError, HemoVecError, RecordFailure, SequenceTooLong, UnknownToken


def assemble_matrix(tokens, table, max_len, sequence_id=None):
    """ Looks up each token and returns a (max_len, dim) CSR matrix.
    """
    n_tokens = len(tokens)
    if n_tokens > max_len:
        raise SequenceTooLong(n_tokens, max_len, sequence_id)

    dim = table.dim
    block = np.empty((n_tokens, dim), dtype='float32')
    for n, token in enumerate(tokens):
        if token not in table:
            raise UnknownToken(token, sequence_id)
        block[n, :] = table[token]

    rows = np.repeat(np.arange(n_tokens), dim)
    cols = np.tile(np.arange(dim), n_tokens)
    return sparse.csr_matrix((block.ravel(), (rows, cols)), shape=(max_len, dim), dtype='float32')


def _assemble_one(job, table, max_len):
    """ Worker task: never raises for data errors, hands them back instead.
    """
    position, sequence_id, tokens = job
    try:
        return position, assemble_matrix(tokens, table, max_len, sequence_id), None
    except HemoVecError as e:
        return position, None, e


def assemble_batch(token_lists, ids, table, max_len, workers=1):
    """ Assembles every peptide, fanning out over a process pool.

        Returns the dense (n_ok, max_len, dim) array in input order, the
        input positions that made it into the array, and the failures.
    """
    jobs = list(zip(range(len(token_lists)), ids, token_lists))
    task = partial(_assemble_one, table=table, max_len=max_len)

    if workers > 1 and len(jobs) > 1:
        with mp.Pool(workers) as pool:
            outcomes = pool.map(task, jobs, chunksize=max(1, len(jobs) // (4 * workers)))
    else:
        outcomes = [task(job) for job in jobs]

    failures = [RecordFailure(position, ids[position], error)
                for position, matrix, error in outcomes if error is not None]
    kept = [position for position, matrix, error in outcomes if error is None]

    X = np.zeros((len(kept), max_len, table.dim), dtype='float32')
    for n, position in enumerate(kept):
        X[n] = outcomes[position][1].toarray()

    return X, np.asarray(kept, dtype='int64'), failures


def build_feature_array(token_lists, ids, table, max_len, workers=1, skip_invalid=False):
    """ Assembles the classifier input.

        By default any failing peptide aborts with a BatchAssemblyError that
        lists every failure of the batch. With skip_invalid the failing
        peptides are reported and left out, and the returned positions tell
        which labels to keep.
    """
    X, kept, failures = assemble_batch(token_lists, ids, table, max_len, workers)
    if failures:
        if not skip_invalid:
            raise BatchAssemblyError(failures)
        print('Skipping ' + str(len(failures)) + ' peptide(s) that could not be assembled:')
        for failure in failures:
            print('  ' + str(failure.error))
    return X, kept
