import re

from common import GAME_SIZE, InvalidInput

BOM = "\ufeff"
CSV_HEADER = ";".join(["Jogo"] + [f"D{i}" for i in range(1, GAME_SIZE + 1)])


def games_to_txt(games):
    return "\n".join(" ".join(f"{n:02d}" for n in g.numbers) for g in games)


def games_to_csv(games):
    """Semicolon rows with a header and a leading BOM so spreadsheets read it as UTF-8."""
    rows = [f"Jogo {g.id};" + ";".join(map(str, g.numbers)) for g in games]
    return BOM + "\n".join([CSV_HEADER] + rows)


def parse_numbers(line):
    # Handles both "9" and "09", space or comma separated
    try:
        return sorted(int(x) for x in re.split(r"[\s,;]+", line.strip()) if x)
    except ValueError as e:
        raise InvalidInput(f"not a list of numbers: {line!r}") from e


def parse_games_txt(text):
    return [parse_numbers(line) for line in text.lstrip(BOM).splitlines() if line.strip()]
