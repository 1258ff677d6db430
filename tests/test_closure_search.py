import random, threading

import numpy as np
import pytest

import closure_search
from closure_search import (
    GenerationResult, SearchCancelled, frequency, is_balanced, search, search_parallel,
)
from common import InvalidInput, TOTAL_NUMBERS, mask
from proof_closure import validate_guarantee

POOL = [n for n in range(1, 26) if n not in (2, 11, 17, 25)]


def assert_contract(result, budget):
    if result.guaranteed:
        assert len(result.games) == 8
        assert [g.id for g in result.games] == list(range(1, 9))
        for g in result.games:
            assert len(g.numbers) == 15
            assert list(g.numbers) == sorted(set(g.numbers))
            assert set(g.numbers) <= set(POOL)
        assert result.min_points >= 11
        assert 1 <= result.attempts <= budget
        proof = validate_guarantee([g.mask for g in result.games], POOL)
        assert proof.min_points == result.min_points
    else:
        assert result.games == ()
        assert result.min_points == 0
        assert result.attempts == budget


class TestFrequency:
    def test_counts_per_number(self):
        """Frequency counts how many games hold each number."""
        masks = [mask([1, 2, 3]), mask([2, 3]), mask([3])]
        freq = frequency(masks)
        assert len(freq) == TOTAL_NUMBERS + 1
        assert freq[1:4] == [1, 2, 3]
        assert sum(freq) == 6

    def test_balance_floor(self):
        """A pool number held by fewer than 5 games rejects the candidate."""
        masks = [mask(POOL[:15])] * 8
        assert not is_balanced(masks, POOL)
        assert is_balanced([mask(POOL)] * 5, POOL)


class TestSearch:
    def test_finds_closure(self):
        """A seeded search finds 8 games that prove 11 points over the pool."""
        result = search(POOL, 500, rng=random.Random(0))
        assert result.guaranteed
        assert result.combinations_tested == 54264
        assert_contract(result, 500)
        proof = validate_guarantee([g.mask for g in result.games], POOL, threshold=0)
        assert proof.min_points == result.min_points
        assert proof.combos_scanned == 54264

    def test_deterministic(self):
        """The same seed gives the same games, points and attempt count."""
        a = search(POOL, 500, rng=random.Random(0))
        b = search(POOL, 500, rng=random.Random(0))
        assert a.guaranteed
        assert a.games == b.games
        assert (a.min_points, a.attempts) == (b.min_points, b.attempts)

    def test_short_budget_contract(self):
        """Whatever a small budget yields satisfies the result contract."""
        assert_contract(search(POOL, 60, rng=random.Random(5)), 60)

    def test_numpy_pool(self):
        """A numpy array pool is accepted and yields plain ints."""
        result = search(np.array(POOL), 500, rng=random.Random(0))
        assert all(type(n) is int for g in result.games for n in g.numbers)
        assert result.games == search(POOL, 500, rng=random.Random(0)).games

    def test_accepts_first_balanced_candidate(self, monkeypatch):
        """With no floor and no threshold the first candidate is accepted after a full scan."""
        monkeypatch.setattr(closure_search, "GUARANTEE_POINTS", 0)
        monkeypatch.setattr(closure_search, "MIN_FREQUENCY", 0)
        result = search(POOL, 10, rng=random.Random(1))
        assert result.guaranteed
        assert result.attempts == 1
        assert result.combinations_tested == 54264
        masks = [g.mask for g in result.games]
        assert result.min_points == validate_guarantee(masks, POOL, threshold=0).min_points

    def test_exhaustion_is_not_an_error(self, monkeypatch):
        """Running out of attempts returns an empty, non-guaranteed result."""
        monkeypatch.setattr(closure_search, "MIN_FREQUENCY", 9)
        result = search(POOL, 25, rng=random.Random(1))
        assert result == GenerationResult(time_ms=result.time_ms, attempts=25)
        assert_contract(result, 25)

    def test_cancel(self):
        """A set cancel event stops the search before any attempt."""
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(SearchCancelled) as exc:
            search(POOL, 10, rng=random.Random(1), cancel=cancel)
        assert exc.value.attempts == 0

    @pytest.mark.parametrize("pool", [POOL[:20], POOL[:20] + [POOL[0]], POOL[:20] + [30]])
    def test_invalid_pool(self, pool):
        """Wrong size, duplicates or out-of-range pools are rejected."""
        with pytest.raises(InvalidInput):
            search(pool, 10, rng=random.Random(1))

    @pytest.mark.parametrize("budget", [0, -1, 2.5])
    def test_invalid_budget(self, budget):
        """The attempt budget must be a positive integer."""
        with pytest.raises(InvalidInput):
            search(POOL, budget)

    def test_as_dict(self):
        """as_dict turns games into plain lists for JSON."""
        d = GenerationResult(attempts=3).as_dict()
        assert d["games"] == []
        assert d["guaranteed"] is False


class TestSearchParallel:
    def test_finds_closure_independent_of_worker_count(self):
        """Parallel search accepts the same attempt whatever the worker count."""
        a = search_parallel(POOL, 2000, seed=0, workers=1)
        b = search_parallel(POOL, 2000, seed=0, workers=3)
        assert a.guaranteed
        assert_contract(a, 2000)
        assert a.games == b.games
        assert (a.min_points, a.attempts) == (b.min_points, b.attempts)
