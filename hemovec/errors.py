"""
Errors raised while turning peptide tables into embedding matrices.

Every error carries the identifier of the offending peptide (its sequence)
so that a batch report can point at the exact record. Errors are rebuilt
from their constructor arguments when pickled, so they survive the trip
back from a worker process.
"""


class HemoVecError(Exception):
    """ Base class for all pipeline data errors.
    """
    def __init__(self, message, sequence_id=None):
        self.sequence_id = sequence_id
        self._init_args = (message, sequence_id)
        if sequence_id is not None:
            message = message + ' (peptide ' + str(sequence_id) + ')'
        super().__init__(message)

    def __reduce__(self):
        return (self.__class__, self._init_args)


class DataIntegrityError(HemoVecError):
    """ Duplicate or missing join keys, missing columns or malformed values.
    """


class UnknownStructureCode(DataIntegrityError):
    def __init__(self, code, sequence_id=None):
        self.code = code
        super().__init__('unrecognized secondary structure code ' + repr(code), sequence_id)
        self._init_args = (code, sequence_id)


class LengthMismatch(HemoVecError):
    def __init__(self, sequence_length, structure_length, sequence_id=None):
        self.sequence_length = sequence_length
        self.structure_length = structure_length
        super().__init__('sequence has ' + str(sequence_length) + ' residues but structure has '
                         + str(structure_length) + ' labels', sequence_id)
        self._init_args = (sequence_length, structure_length, sequence_id)


class UnknownToken(HemoVecError):
    def __init__(self, token, sequence_id=None):
        self.token = token
        super().__init__('token ' + repr(token) + ' is not in the embedding table', sequence_id)
        self._init_args = (token, sequence_id)


class SequenceTooLong(HemoVecError):
    def __init__(self, length, max_len, sequence_id=None):
        self.length = length
        self.max_len = max_len
        super().__init__('peptide has ' + str(length) + ' tokens, more than max_len=' + str(max_len),
                         sequence_id)
        self._init_args = (length, max_len, sequence_id)


class RecordFailure(object):
    """ One failed record of a batch: its position in the input and the error.
    """
    def __init__(self, position, sequence_id, error):
        self.position = position
        self.sequence_id = sequence_id
        self.error = error

    def __repr__(self):
        return 'RecordFailure(position=%d, sequence_id=%r, error=%s)' % (
            self.position, self.sequence_id, type(self.error).__name__)


class BatchAssemblyError(HemoVecError):
    """ Raised once a whole batch has been processed and some records failed.
    """
    def __init__(self, failures):
        self.failures = list(failures)
        lines = [str(len(self.failures)) + ' peptide(s) could not be processed:']
        for failure in self.failures:
            lines.append('  [' + str(failure.position) + '] ' + str(failure.error))
        super().__init__('\n'.join(lines))
        self._init_args = (self.failures,)
