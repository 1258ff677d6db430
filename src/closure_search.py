"""Randomized closure search: draw 8-game candidates until one carries the 11-point guarantee.

Every attempt is an independent trial (no local search between attempts):

1. sample GAMES_PER_SET games, each a uniform GAME_SIZE-subset of the pool;
2. reject unless every pool number appears in at least MIN_FREQUENCY games;
3. prove the candidate with `min_of_max` and accept at GUARANTEE_POINTS or more.
"""
from dataclasses import dataclass, field, asdict
from concurrent.futures import ProcessPoolExecutor
import os, random, time

from tqdm import tqdm

from common import (
    GAME_SIZE, GAMES_PER_SET, GUARANTEE_POINTS, MIN_FREQUENCY, MAX_ATTEMPTS, DRAW_SIZE, TOTAL_NUMBERS,
    InvalidInput, mask, unmask, validate_pool,
)
from proof_closure import min_of_max, pool_bits, game_masks


class SearchCancelled(RuntimeError):
    def __init__(self, attempts):
        super().__init__(f"closure search cancelled after {attempts} attempts")
        self.attempts = attempts


@dataclass(frozen=True)
class Game:
    id: int
    numbers: tuple

    @property
    def mask(self):
        return mask(self.numbers)


@dataclass(frozen=True)
class GenerationResult:
    games: tuple = field(default_factory=tuple)
    min_points: int = 0
    guaranteed: bool = False
    attempts: int = 0
    time_ms: int = 0
    combinations_tested: int = 0

    def as_dict(self):
        d = asdict(self)
        d["games"] = [{"id": g.id, "numbers": list(g.numbers)} for g in self.games]
        return d


def sample_candidate(pool, rng):
    return [mask(rng.sample(pool, GAME_SIZE)) for _ in range(GAMES_PER_SET)]


def frequency(masks):
    """How many of the games contain each number; index 0 is unused."""
    freq = [0] * (TOTAL_NUMBERS + 1)
    for m in masks:
        for x in unmask(m):
            freq[x] += 1
    return freq


def is_balanced(masks, pool):
    freq = frequency(masks)
    return all(freq[x] >= MIN_FREQUENCY for x in pool)


def attempt(pool, bits, rng):
    """One trial. Returns (masks, proof) or (masks, None) when the frequency filter rejects."""
    masks = sample_candidate(pool, rng)
    if not is_balanced(masks, pool):
        return masks, None
    best, scanned = min_of_max(game_masks(masks), bits, DRAW_SIZE, GUARANTEE_POINTS)
    return masks, (int(best), int(scanned))


def _accepted(masks, proof, attempts, start):
    games = tuple(Game(i + 1, tuple(unmask(m))) for i, m in enumerate(masks))
    return GenerationResult(
        games=games,
        min_points=proof[0],
        guaranteed=True,
        attempts=attempts,
        time_ms=int((time.perf_counter() - start) * 1000),
        combinations_tested=proof[1],
    )


def _exhausted(attempts, start):
    return GenerationResult(attempts=attempts, time_ms=int((time.perf_counter() - start) * 1000))


def _check_budget(attempt_budget):
    if isinstance(attempt_budget, bool) or not isinstance(attempt_budget, int) or attempt_budget < 1:
        raise InvalidInput(f"attempt budget must be a positive integer, got {attempt_budget!r}")


def search(pool, attempt_budget=MAX_ATTEMPTS, rng=None, cancel=None, progress=False):
    """Search for GAMES_PER_SET games guaranteeing GUARANTEE_POINTS inside `pool`.

    `rng` is a random.Random (fresh and unseeded when omitted); `cancel` is an optional
    threading.Event polled once per attempt. Exhausting the budget is a normal result
    with guaranteed=False.
    """
    pool = list(validate_pool(pool))
    _check_budget(attempt_budget)
    rng = rng if rng is not None else random.Random()
    bits = pool_bits(pool)
    start = time.perf_counter()

    for n in tqdm(range(1, attempt_budget + 1), desc="Closure search", unit="try", disable=not progress):
        if cancel is not None and cancel.is_set():
            raise SearchCancelled(n - 1)
        masks, proof = attempt(pool, bits, rng)
        if proof is not None and proof[0] >= GUARANTEE_POINTS:
            return _accepted(masks, proof, n, start)

    return _exhausted(attempt_budget, start)


def _seeded_attempt(args):
    pool, seed = args
    return attempt(pool, pool_bits(pool), random.Random(seed))


def search_parallel(pool, attempt_budget=MAX_ATTEMPTS, seed=None, workers=None, cancel=None, progress=False):
    """Same contract as `search`, with attempts spread over worker processes.

    Attempt i draws its games from random.Random(seed_i), seed_i taken in order from
    random.Random(seed), so the accepted attempt does not depend on `workers`.
    """
    pool = list(validate_pool(pool))
    _check_budget(attempt_budget)
    master = random.Random(seed)
    seeds = [master.randint(0, 2**32) for _ in range(attempt_budget)]
    start = time.perf_counter()

    workers = workers or os.cpu_count() or 1
    batch = workers * 4

    with ProcessPoolExecutor(max_workers=workers) as executor:
        with tqdm(total=attempt_budget, desc="Closure search", unit="try", disable=not progress) as pbar:
            for lo in range(0, attempt_budget, batch):
                if cancel is not None and cancel.is_set():
                    raise SearchCancelled(lo)
                chunk = [(pool, s) for s in seeds[lo:lo + batch]]
                for off, (masks, proof) in enumerate(executor.map(_seeded_attempt, chunk)):
                    if proof is not None and proof[0] >= GUARANTEE_POINTS:
                        pbar.update(off + 1)
                        return _accepted(masks, proof, lo + off + 1, start)
                pbar.update(len(chunk))

    return _exhausted(attempt_budget, start)
