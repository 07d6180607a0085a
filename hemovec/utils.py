"""
Small helpers shared by the HemoVec and HemoCNN stages.
"""


import os


def str2bool(v):
    """ Interprets a config string as a boolean flag.
    """
    if isinstance(v, bool):
        return v
    value = v.strip().lower()
    if value in ('yes', 'true', 't', 'y', '1'):
        return True
    if value in ('no', 'false', 'f', 'n', '0'):
        return False
    raise ValueError('Boolean value expected, got ' + repr(v))


def ensure_dir(dirname):
    if not os.path.exists(dirname):
        os.makedirs(dirname)
    return dirname
