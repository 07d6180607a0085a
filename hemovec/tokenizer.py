"""
Turns a peptide and its predicted secondary structure into a "sentence" of
1-gram tokens, one token per residue: the amino acid letter followed by the
name of the structure it sits in (e.g. 'G' in a helix -> 'Ghelix').
"""


import io
from collections import OrderedDict

from hemovec.errors import BatchAssemblyError, LengthMismatch, RecordFailure, UnknownStructureCode


# Single letter structure codes of the predictor and the labels used in tokens
structure_names = OrderedDict([
    ('H', 'helix'),
    ('E', 'sheet'),
    ('C', 'coil')
])


def expand_structure(structure, sequence_id=None):
    """ Maps every structure code to its semantic name.
    """
    labels = []
    for code in structure:
        if code not in structure_names:
            raise UnknownStructureCode(code, sequence_id)
        labels.append(structure_names[code])
    return labels


def tokenize(sequence, structure, sequence_id=None):
    """ Pairs the i-th amino acid with the i-th structure label.
    """
    if len(sequence) != len(structure):
        raise LengthMismatch(len(sequence), len(structure), sequence_id)
    labels = expand_structure(structure, sequence_id)
    return [aa + label for aa, label in zip(sequence, labels)]


def tokenize_records(records):
    """ Tokenizes every record, collecting failures instead of stopping at the first.

        Returns the token lists (None for failed records, so positions still
        line up with the input) and the list of RecordFailure.
    """
    token_lists = []
    failures = []
    for position, record in enumerate(records):
        try:
            token_lists.append(tokenize(record.sequence, record.structure, record.sequence_id))
        except (LengthMismatch, UnknownStructureCode) as e:
            token_lists.append(None)
            failures.append(RecordFailure(position, record.sequence_id, e))
    return token_lists, failures


def tokenize_peptides(peptides, skip_invalid=False):
    """ Tokenizes the peptides in input order; bad records abort the run
        unless skip_invalid, in which case they are reported and left out.

        Returns the kept peptides and their token lists.
    """
    token_lists, failures = tokenize_records(peptides)
    if failures:
        if not skip_invalid:
            raise BatchAssemblyError(failures)
        print('Skipping ' + str(len(failures)) + ' peptide(s) that could not be tokenized:')
        for failure in failures:
            print('  ' + str(failure.error))
    kept = [i for i, tokens in enumerate(token_lists) if tokens is not None]
    return [peptides[i] for i in kept], [token_lists[i] for i in kept]


def to_sentence(tokens):
    return ' '.join(tokens)


def write_corpus(token_lists, fname):
    """ Writes one space separated sentence per peptide.
    """
    with io.open(fname, 'w', encoding='utf-8') as f:
        for tokens in token_lists:
            f.write(to_sentence(tokens) + '\n')


def read_corpus(fname):
    with io.open(fname, 'r', encoding='utf-8') as f:
        return [line.split() for line in f if line.strip()]
