"""
The main driver to the HemoVec and HemoCNN stages.
"""


import configparser
import sys
from hemovec import Hemo_Vec
from hemovec import Hemo_CNN
from hemovec import assembler
from hemovec import records
from hemovec import tokenizer
from hemovec import utils
from hemovec import visualize
from hemovec.errors import HemoVecError


def example_peptide(dirnames, table, max_len):
    """ Assembles the first peptide of the merged tables that tokenizes and
        fits the embedding table, for the matrix figure.
    """
    for peptide in records.load_records(dirnames['sequences'], dirnames['structures']):
        try:
            tokens = tokenizer.tokenize(peptide.sequence, peptide.structure, peptide.sequence_id)
            matrix = assembler.assemble_matrix(tokens, table, max_len, peptide.sequence_id)
        except HemoVecError:
            continue
        return matrix, tokens, peptide.sequence
    return None


def main(argv):
    """ Parses user inputs from config.ini and runs the pipeline.
    """
    config = configparser.ConfigParser()
    # keep the case of directory keys such as HemoVec_embedding
    config.optionxform = str
    if not config.read(argv[1]):
        raise SystemExit('could not read config file ' + argv[1])
    pipeline = config['Pipeline']
    dirnames = config['FilesDirectories']
    features = config['Features']

    table = None
    if utils.str2bool(pipeline['HemoVec']):
        print("Starting to learn a distributed representation of residue/structure tokens...")
        table = Hemo_Vec.run(config['HemoVec'], dirnames, utils.str2bool(features['skip_invalid']))

    stages = ['visualize', 'train', 'evaluate', 'inference']
    if table is None and any(utils.str2bool(pipeline[s]) for s in stages):
        table = Hemo_Vec.load_table(dirnames)

    if utils.str2bool(pipeline['visualize']):
        print("Drawing the token embedding...")
        example = example_peptide(dirnames, table, int(features['max_len']))
        visualize.run(table, dirnames['figures'], seed=int(features['seed']), example=example)

    if utils.str2bool(pipeline['train']):
        print("Starting the training of HemoCNN...")
        Hemo_CNN.train(config['HemoCNN'], features, dirnames, table)

    if utils.str2bool(pipeline['evaluate']):
        print("Performing evaluation on the test set...")
        Hemo_CNN.evaluate(config['HemoCNN'], features, dirnames, table)

    if utils.str2bool(pipeline['inference']):
        print("Performing inference on the test set...")
        Hemo_CNN.inference(config['HemoCNN'], features, dirnames, table)


if __name__ == '__main__':
    main(sys.argv)
