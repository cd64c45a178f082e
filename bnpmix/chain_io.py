import gzip
import os
import pickle as _pickle


def get_open(file_str):
    if file_str[-3:] == ".gz":
        my_open = gzip.open
    else:
        my_open = open
    return my_open

def pickle(var_to_pkl, file_str, dir=None):
    my_open = get_open(file_str)
    if dir:
        file_str = os.path.join(dir, file_str)
    with my_open(file_str, 'wb') as fh:
        _pickle.dump(var_to_pkl, fh)

def unpickle(file_str, dir=None):
    my_open = get_open(file_str)
    if dir:
        file_str = os.path.join(dir, file_str)
    with my_open(file_str, 'rb') as fh:
        var_from_pkl = _pickle.load(fh)
    return var_from_pkl


class ChainCollector(object):
    """Keeps every collected snapshot in memory, in order."""

    def __init__(self):
        self.states = []

    def collect(self, snapshot):
        self.states.append(snapshot)

    def __len__(self):
        return len(self.states)

    def __iter__(self):
        return iter(self.states)

    def get_states(self):
        return list(self.states)


class FileCollector(ChainCollector):
    """Appends each snapshot to a pickle stream as soon as it arrives;
    gzipped when the filename ends in .gz.  Nothing is kept in memory.
    """

    def __init__(self, file_str, dir=None):
        ChainCollector.__init__(self)
        if dir:
            file_str = os.path.join(dir, file_str)
        self.file_str = file_str
        self.num_collected = 0
        # truncate, so a rerun does not append to a stale chain
        with get_open(self.file_str)(self.file_str, 'wb'):
            pass

    def collect(self, snapshot):
        with get_open(self.file_str)(self.file_str, 'ab') as fh:
            _pickle.dump(snapshot, fh)
        self.num_collected += 1

    def __len__(self):
        return self.num_collected

    def __iter__(self):
        return read_chain(self.file_str)

    def get_states(self):
        return list(read_chain(self.file_str))


def read_chain(file_str, dir=None):
    if dir:
        file_str = os.path.join(dir, file_str)
    with get_open(file_str)(file_str, 'rb') as fh:
        while True:
            try:
                yield _pickle.load(fh)
            except EOFError:
                return
