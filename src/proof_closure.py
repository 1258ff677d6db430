from collections import namedtuple
from math import comb
import numpy as np, numba as nb
from bitarray import bitarray

from common import DRAW_SIZE, GUARANTEE_POINTS, validate_pool, popcount
from combos import advance

Proof = namedtuple("Proof", "min_points combos_scanned")


def pool_bits(pool):
    """One-bit masks of the pool numbers, ascending: the alphabet the draws are built from."""
    return np.array([1 << (x - 1) for x in sorted(pool)], dtype=np.int64)


def game_masks(games):
    return np.array([int(g) for g in games], dtype=np.int64)


@nb.njit(cache=True)
def min_of_max(gmasks, bits, k, floor):
    # min over every k-subset C of the pool of max_g |C & g|
    n = bits.shape[0]
    idx = np.arange(k)
    best = k
    scanned = 0
    while True:
        scanned += 1
        cm = 0
        for i in range(k):
            cm |= bits[idx[i]]
        mx = 0
        for g in gmasks:
            h = popcount(cm & g)
            if h > mx:
                mx = h
                if mx == k:
                    break
        if mx < best:
            best = mx
            if best < floor:
                break
        if not advance(idx, n):
            break
    return best, scanned


@nb.njit(cache=True)
def _fill_max_hits(gmasks, bits, k, out):
    n = bits.shape[0]
    idx = np.arange(k)
    c = 0
    while True:
        cm = 0
        for i in range(k):
            cm |= bits[idx[i]]
        mx = 0
        for g in gmasks:
            h = popcount(cm & g)
            if h > mx:
                mx = h
        out[c] = mx
        c += 1
        if not advance(idx, n):
            break


def validate_guarantee(games, pool, threshold=GUARANTEE_POINTS):
    """Worst-case hit count of `games` (bitmasks) over every 15-number draw inside `pool`.

    Scanning stops as soon as the running minimum falls below `threshold`, so for a
    failing set `min_points` is only an upper bound on the true minimum. Pass
    threshold=0 for a full exhaustive scan.
    """
    pool = validate_pool(pool)
    best, scanned = min_of_max(game_masks(games), pool_bits(pool), DRAW_SIZE, threshold)
    return Proof(int(best), int(scanned))


def max_hits_per_combo(games, pool):
    pool = validate_pool(pool)
    out = np.empty(comb(len(pool), DRAW_SIZE), dtype=np.int8)
    _fill_max_hits(game_masks(games), pool_bits(pool), DRAW_SIZE, out)
    return out


def coverage_map(best, points=GUARANTEE_POINTS):
    """Bitmap over the pool draws (lexicographic order): bit set iff some game scores >= points."""
    covered = bitarray()
    covered.pack((best >= points).tobytes())
    return covered


def guarantee_coverage(games, pool, points=GUARANTEE_POINTS):
    return coverage_map(max_hits_per_combo(games, pool), points)
