from dataclasses import dataclass

from common import DRAW_SIZE, GUARANTEE_POINTS, mask, hits, validate_draw

COST_PER_GAME = 3.50

# prize by hit count, index 0..15
PRIZE_TABLE = (0.0,) * GUARANTEE_POINTS + (7.00, 14.00, 35.00, 1000.00, 1_000_000.00)


@dataclass(frozen=True)
class Conference:
    hits: tuple       # per game, same order as the games
    hit_count: tuple  # games per hit level, index 0..15; only prize levels are counted
    cost: float
    prize: float
    balance: float


def _numbers(game):
    return getattr(game, "numbers", game)


def check_games(games, draw):
    """Score a set of games against an official 15-number draw."""
    dmask = mask(validate_draw(draw))
    per_game = tuple(int(hits(mask(_numbers(g)), dmask)) for g in games)

    hit_count = [0] * (DRAW_SIZE + 1)
    prize = 0.0
    for h in per_game:
        if h >= GUARANTEE_POINTS:
            hit_count[h] += 1
            prize += PRIZE_TABLE[h]

    cost = len(per_game) * COST_PER_GAME
    return Conference(per_game, tuple(hit_count), cost, prize, prize - cost)
