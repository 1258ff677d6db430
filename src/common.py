import random
from numbers import Integral
import numba as nb

TOTAL_NUMBERS = 25
POOL_SIZE = 21
GAME_SIZE = 15
DRAW_SIZE = 15
GAMES_PER_SET = 8
GUARANTEE_POINTS = 11
MIN_FREQUENCY = 5
MAX_ATTEMPTS = 500


class InvalidInput(ValueError):
    pass


def mask(nums):
    """Encode numbers 1..25 as a bitmask, bit n-1 set for number n."""
    v = 0
    for x in nums:
        if isinstance(x, bool) or not isinstance(x, Integral):
            raise InvalidInput(f"not an integer: {x!r}")
        x = int(x)
        if not 1 <= x <= TOTAL_NUMBERS:
            raise InvalidInput(f"number out of range 1..{TOTAL_NUMBERS}: {x}")
        bit = 1 << (x - 1)
        if v & bit:
            raise InvalidInput(f"duplicate number: {x}")
        v |= bit
    return v


def unmask(m):
    return [i + 1 for i in range(TOTAL_NUMBERS) if m >> i & 1]


@nb.njit(cache=True)
def popcount(m):
    c = 0
    while m:
        m &= m - 1
        c += 1
    return c


@nb.njit(cache=True)
def hits(a, b):
    return popcount(a & b)


def _validate(nums, size, what):
    nums = list(nums)
    if len(nums) != size:
        raise InvalidInput(f"{what} must have exactly {size} numbers, got {len(nums)}")
    mask(nums)
    return tuple(sorted(int(x) for x in nums))


def validate_pool(pool):
    """Check the 21-number pool contract; returns it as an ascending tuple."""
    return _validate(pool, POOL_SIZE, "pool")


def validate_draw(draw):
    return _validate(draw, DRAW_SIZE, "draw")


def random_pool(rng=None):
    rng = rng or random.Random()
    return sorted(rng.sample(range(1, TOTAL_NUMBERS + 1), POOL_SIZE))
