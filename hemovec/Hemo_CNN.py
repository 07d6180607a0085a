"""
This file implements the convolutional neural network to train,
evaluate, and make inference prediction of hemolytic activity from
assembled peptide embedding matrices.
"""


import numpy as np
import pandas as pd
import os

from sklearn.metrics import accuracy_score, confusion_matrix, matthews_corrcoef, roc_auc_score

from keras.models import Sequential, load_model
from keras.layers import Input, Dense, Dropout, Activation, Flatten, Conv1D, LeakyReLU
from keras.optimizers import Adam
from keras.callbacks import EarlyStopping

from hemovec import assembler
from hemovec import records
from hemovec import splitter
from hemovec import tokenizer
from hemovec import utils


def model_path(dirnames, i):
    return os.path.join(dirnames['HemoCNN_models'], 'hemo_cnn_model_' + str(i) + '.keras')


def read_in_datasets(features, dirnames, table):
    """ Reads the peptide tables, assembles one embedding matrix per peptide
        and returns the train and test design and target matrices.
    """
    max_len = int(features['max_len'])
    skip_invalid = utils.str2bool(features['skip_invalid'])

    peptides = records.load_records(dirnames['sequences'], dirnames['structures'])
    peptides, token_lists = tokenizer.tokenize_peptides(peptides, skip_invalid)

    ids = [p.sequence_id for p in peptides]
    X, kept = assembler.build_feature_array(token_lists, ids, table, max_len,
                                            workers=int(features['workers']), skip_invalid=skip_invalid)
    peptides = [peptides[i] for i in kept]
    y = np.array([p.label for p in peptides], dtype='int32')
    print('Assembled ' + str(X.shape[0]) + ' peptide matrices of shape ' + str(X.shape[1:]) + '.')

    datasets = splitter.split_dataset(X, y, float(features['train_fraction']), int(features['seed']))
    datasets['seq_test'] = [peptides[i].sequence for i in datasets['idx_test']]
    return datasets


def build_model(max_len, embedded_dim, nb_filter=32, filter_length=7, dropout=.25, lr=.004):
    """ Two convolution blocks over the residue axis followed by a dense
        sigmoid classifier.
    """
    model = Sequential()
    model.add(Input(shape=(max_len, embedded_dim)))

    model.add(Conv1D(nb_filter, filter_length, padding='same', kernel_initializer='glorot_normal'))
    model.add(LeakyReLU(negative_slope=.3))
    model.add(Dropout(dropout))

    model.add(Conv1D(nb_filter, filter_length, padding='same', kernel_initializer='glorot_normal'))
    model.add(LeakyReLU(negative_slope=.3))
    model.add(Dropout(dropout))

    model.add(Flatten())
    model.add(Dense(nb_filter))
    model.add(Activation('sigmoid'))

    model.add(Dense(1))
    model.add(Activation('sigmoid'))

    model.compile(loss='binary_crossentropy',
                  optimizer=Adam(learning_rate=lr),
                  metrics=['accuracy'])
    return model


def evaluation_metrics(y_true, y_score, threshold=.5):
    """ Accuracy, Matthews correlation, ROC AUC and the confusion matrix of
        thresholded scores.
    """
    y_true = np.asarray(y_true)
    y_pred = np.where(np.asarray(y_score) >= threshold, 1, 0)
    metrics = {}
    metrics['accuracy'] = accuracy_score(y_true, y_pred)
    metrics['mcc'] = matthews_corrcoef(y_true, y_pred)
    # AUC is undefined with a single class in the test set
    if len(np.unique(y_true)) > 1:
        metrics['auc'] = roc_auc_score(y_true, y_score)
    else:
        metrics['auc'] = float('nan')
    metrics['confusion'] = confusion_matrix(y_true, y_pred, labels=[0, 1])
    return metrics


def train(params, features, dirnames, table):
    """ Trains an ensemble of HemoCNN models
    """
    datasets = read_in_datasets(features, dirnames, table)
    max_len, embedded_dim = datasets['X_train'].shape[1:]

    # CNN parameters
    batch_size = int(np.ceil(len(datasets['X_train']) / 100.0))  # variable batch size depending on number of data points
    epochs = int(params['epochs'])
    nb_filter = int(params['filter_size'])
    filter_length = int(params['filter_length'])
    dropout = float(params['dropout'])
    lr = float(params['lr'])
    n_models = int(params['n_models'])
    patience = int(params['patience'])

    utils.ensure_dir(dirnames['HemoCNN_models'])
    i = 0
    attempts = 0
    while i < n_models:
        if attempts >= 3 * n_models:
            raise RuntimeError('HemoCNN diverged in ' + str(attempts - i) + ' of ' + str(attempts) + ' runs')
        attempts += 1

        model = build_model(max_len, embedded_dim, nb_filter, filter_length, dropout, lr)
        earlyStopping = EarlyStopping(monitor='loss', patience=patience, verbose=1, mode='auto')
        mod = model.fit(datasets['X_train'], datasets['Y_train'], batch_size=batch_size, epochs=epochs, verbose=1,
                        callbacks=[earlyStopping], shuffle=True,
                        validation_data=(datasets['X_test'], datasets['Y_test']))
        modLoss = mod.history['loss']

        # check to make sure optimization didn't diverge
        if np.isnan(modLoss[-1]):
            print('Optimization diverged, retraining model ' + str(i) + '...')
            continue
        model.save(model_path(dirnames, i))
        i += 1


def make_predictions(dirnames, X_test, n_models):
    """ Averages the scores of the saved ensemble
    """
    predScores = np.zeros((n_models, len(X_test)))
    for i in range(n_models):
        model = load_model(model_path(dirnames, i))
        predScores[i, :] = np.squeeze(model.predict(X_test), axis=-1)
    return np.average(predScores, axis=0)


def write_predictions(dirnames, sequences, Y_pred, Y_true=None):
    """ Writes out prediction scores and labels to a new file
    """
    utils.ensure_dir(dirnames['results'])
    df = pd.DataFrame({'sequence': list(sequences),
                       'predicted_score': Y_pred,
                       'predicted_label': ['hemolytic' if score >= .5 else 'non-hemolytic' for score in Y_pred]})
    if Y_true is not None:
        df['label'] = Y_true
    fname = os.path.join(dirnames['results'], 'predictions.csv')
    df.to_csv(fname, index=False)
    return fname


def evaluate(params, features, dirnames, table):
    """ Evaluates the ensemble on the test split.
    """
    datasets = read_in_datasets(features, dirnames, table)
    Y_test = datasets['Y_test']
    Y_pred = make_predictions(dirnames, datasets['X_test'], int(params['n_models']))

    metrics = evaluation_metrics(Y_test, Y_pred)
    print('Accuracy: ' + str(round(metrics['accuracy'], 3)))
    print('MCC: ' + str(round(metrics['mcc'], 3)))
    print('AUC: ' + str(round(metrics['auc'], 3)))
    print('Confusion matrix (rows true, columns predicted):')
    print(metrics['confusion'])
    return metrics


def inference(params, features, dirnames, table):
    """ Makes inference prediction on the test split.
    """
    datasets = read_in_datasets(features, dirnames, table)
    Y_pred = make_predictions(dirnames, datasets['X_test'], int(params['n_models']))
    fname = write_predictions(dirnames, datasets['seq_test'], Y_pred, datasets['Y_test'])
    print('Predictions written to ' + fname)
