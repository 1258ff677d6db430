from math import comb
import numpy as np, numba as nb


@nb.njit(cache=True)
def advance(idx, n):
    """Step idx (ascending indices into an n-sequence) to its lexicographic successor.

    Returns False, leaving idx untouched, when idx is already the last k-subset.
    """
    k = idx.shape[0]
    i = k - 1
    while i >= 0 and idx[i] == i + n - k:
        i -= 1
    if i < 0:
        return False
    idx[i] += 1
    for j in range(i + 1, k):
        idx[j] = idx[i] + j - i
    return True


def combine(seq, k):
    """Lazily yield every k-subset of seq as a tuple, in lexicographic index order."""
    items = tuple(seq)
    n = len(items)
    if k < 0 or k > n:
        return
    idx = np.arange(k, dtype=np.int64)
    while True:
        yield tuple(items[i] for i in idx)
        if not advance(idx, n):
            return


class Combinations:
    """Restartable view over the k-subsets of seq; each iteration starts afresh."""

    def __init__(self, seq, k):
        self.items = tuple(seq)
        self.k = k

    def __iter__(self):
        return combine(self.items, self.k)

    def __len__(self):
        if self.k < 0 or self.k > len(self.items):
            return 0
        return comb(len(self.items), self.k)
