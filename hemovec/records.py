"""
Reads the peptide and secondary-structure tables and joins them into one
row per peptide carrying sequence, hemolytic label and structure string.
"""


from collections import namedtuple

import numpy as np
import pandas as pd

from hemovec.errors import DataIntegrityError


PeptideRecord = namedtuple('PeptideRecord', ['sequence_id', 'sequence', 'structure', 'label'])

SEQUENCE_COLUMNS = ['sequence', 'label']
STRUCTURE_COLUMNS = ['sequence', 'structure']


def _check_columns(df, columns, fname):
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise DataIntegrityError(str(fname) + ' is missing column(s): ' + ', '.join(missing))


def _clean_strings(df, column, fname):
    """ Strips whitespace from a string column and rejects empty or missing cells.
    """
    if df[column].isnull().any():
        rows = list(np.where(df[column].isnull())[0])
        raise DataIntegrityError(str(fname) + ': missing ' + column + ' at row(s) ' + str(rows))
    df[column] = df[column].astype(str).str.strip().str.upper()
    empty = df[column] == ''
    if empty.any():
        raise DataIntegrityError(str(fname) + ': empty ' + column + ' at row(s) '
                                 + str(list(np.where(empty)[0])))
    return df


def load_sequences(fname):
    """ Reads the peptide table (sequence, binary hemolytic label).
    """
    df = pd.read_csv(fname, header=0)
    _check_columns(df, SEQUENCE_COLUMNS, fname)
    df = df[SEQUENCE_COLUMNS].copy()
    df = _clean_strings(df, 'sequence', fname)

    labels = pd.to_numeric(df['label'], errors='coerce')
    bad = ~labels.isin([0, 1])
    if bad.any():
        raise DataIntegrityError(str(fname) + ': label must be 0 or 1, got '
                                 + str(list(df.loc[bad, 'label'])), df.loc[bad, 'sequence'].iloc[0])
    df['label'] = labels.astype(int)
    return df.reset_index(drop=True)


def load_structures(fname):
    """ Reads the predicted secondary structure table (sequence, structure string).
    """
    df = pd.read_csv(fname, header=0)
    _check_columns(df, STRUCTURE_COLUMNS, fname)
    df = df[STRUCTURE_COLUMNS].copy()
    df = _clean_strings(df, 'sequence', fname)
    df = _clean_strings(df, 'structure', fname)
    return df.reset_index(drop=True)


def _deduplicate(df, value_columns, name):
    """ Collapses identical duplicate rows and fails on conflicting duplicates.
    """
    exact = df.duplicated()
    if exact.any():
        print('Collapsing ' + str(int(exact.sum())) + ' identical duplicate row(s) in the ' + name + ' table.')
        df = df[~exact]

    conflicting = df[df.duplicated('sequence', keep=False)]
    if len(conflicting) > 0:
        keys = sorted(set(conflicting['sequence']))
        raise DataIntegrityError('conflicting ' + '/'.join(value_columns) + ' for duplicated sequence(s) in the '
                                 + name + ' table: ' + ', '.join(keys), keys[0])
    return df


def merge_records(sequences, structures):
    """ Inner join of the peptide and structure tables on the sequence key.

        Only peptides present in both tables survive. The output keeps the
        row order of the peptide table and has the columns sequence, label,
        structure.
    """
    _check_columns(sequences, SEQUENCE_COLUMNS, 'sequence table')
    _check_columns(structures, STRUCTURE_COLUMNS, 'structure table')

    sequences = _deduplicate(sequences[SEQUENCE_COLUMNS], ['label'], 'sequence')
    structures = _deduplicate(structures[STRUCTURE_COLUMNS], ['structure'], 'structure')

    merged = pd.merge(sequences, structures, on='sequence', how='inner', validate='one_to_one')
    return merged[['sequence', 'label', 'structure']].reset_index(drop=True)


def to_records(merged):
    """ Turns a merged table into a list of PeptideRecord.
    """
    return [PeptideRecord(sequence_id=row.sequence, sequence=row.sequence,
                          structure=row.structure, label=int(row.label))
            for row in merged.itertuples(index=False)]


def load_records(sequence_file, structure_file):
    df = merge_records(load_sequences(sequence_file), load_structures(structure_file))
    print('There are ' + str(len(df)) + ' peptides with both a label and a predicted structure...')
    return to_records(df)
