import argparse, json, random, sys

import numpy as np

from common import GUARANTEE_POINTS, MAX_ATTEMPTS, DRAW_SIZE, InvalidInput, mask, random_pool, validate_pool
from closure_search import Game, search, search_parallel
from export import games_to_txt, games_to_csv, parse_games_txt, parse_numbers
from proof_closure import max_hits_per_combo, coverage_map
from results import check_games


def build_parser():
    parser = argparse.ArgumentParser(prog="fechamento", description="8-game 11-point closure over a 21-number pool")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("search", help="search an 8-game closure for a pool")
    p.add_argument("--pool", help="21 numbers, e.g. '1 2 3 ...' or '1,2,3,...'")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--attempts", type=int, default=MAX_ATTEMPTS)
    p.add_argument("--workers", type=int, default=1, help=">1 spreads attempts over processes")
    p.add_argument("--txt", help="write games as plain text")
    p.add_argument("--csv", help="write games as a spreadsheet (semicolon CSV)")
    p.add_argument("--json", action="store_true", help="print the result as JSON")

    p = sub.add_parser("verify", help="prove the worst-case hits of a games file over a pool")
    p.add_argument("games")
    p.add_argument("--pool", required=True)

    p = sub.add_parser("check", help="score a games file against a draw")
    p.add_argument("games")
    p.add_argument("--draw", required=True)
    return parser


def _read_games(path):
    with open(path, encoding="utf-8") as f:
        return parse_games_txt(f.read())


def _write(path, content):
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)
    print(f"[✓] Saved {path}")


def cmd_search(args):
    rng = random.Random(args.seed)
    pool = parse_numbers(args.pool) if args.pool else random_pool(rng)
    pool = validate_pool(pool)
    print(f"[*] Pool: {' '.join(f'{n:02d}' for n in pool)}")

    if args.workers > 1:
        result = search_parallel(pool, args.attempts, seed=args.seed, workers=args.workers, progress=True)
    else:
        result = search(pool, args.attempts, rng=rng, progress=True)

    if args.json:
        json.dump(result.as_dict(), sys.stdout, indent=2)
        print()
    elif result.guaranteed:
        print(f"[+] Closure found after {result.attempts} attempts ({result.time_ms} ms)")
        print(f"    - Minimum points: {result.min_points}")
        print(f"    - Draws proven: {result.combinations_tested:,}")
        for g in result.games:
            print(f"    Jogo {g.id}: {' '.join(f'{n:02d}' for n in g.numbers)}")
    else:
        print(f"[!] No closure within {result.attempts} attempts ({result.time_ms} ms)")

    if result.guaranteed and args.txt:
        _write(args.txt, games_to_txt(result.games))
    if result.guaranteed and args.csv:
        _write(args.csv, games_to_csv(result.games))
    return 0 if result.guaranteed else 1


def cmd_verify(args):
    pool = validate_pool(parse_numbers(args.pool))
    masks = [mask(g) for g in _read_games(args.games)]
    best = max_hits_per_combo(masks, pool)
    min_points = int(best.min())
    covered = coverage_map(best).count()
    print(f"[*] Games: {len(masks)} | Draws: {best.size:,}")
    print(f"    - Minimum points: {min_points}")
    print(f"    - Draws with {GUARANTEE_POINTS}+ points: {covered:,} ({covered / best.size * 100:.4f}%)")
    for h, c in enumerate(np.bincount(best, minlength=DRAW_SIZE + 1)):
        if c:
            print(f"      {h:2d} points: {c:,}")
    if min_points >= GUARANTEE_POINTS:
        print("FULL CLOSURE ✔")
        return 0
    return 1


def cmd_check(args):
    games = [Game(i + 1, tuple(g)) for i, g in enumerate(_read_games(args.games))]
    conf = check_games(games, parse_numbers(args.draw))
    for g, h in zip(games, conf.hits):
        print(f"Jogo {g.id}: {h} points")
    for h in range(GUARANTEE_POINTS, DRAW_SIZE + 1):
        print(f"    - {h} points: {conf.hit_count[h]}")
    print(f"[*] Cost: R$ {conf.cost:.2f} | Prize: R$ {conf.prize:.2f} | Balance: R$ {conf.balance:.2f}")
    return 0


COMMANDS = {"search": cmd_search, "verify": cmd_verify, "check": cmd_check}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return COMMANDS[args.command](args)
    except InvalidInput as e:
        parser.error(str(e))


if __name__ == "__main__":
    sys.exit(main())
