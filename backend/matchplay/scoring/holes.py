import math
from dataclasses import dataclass
from typing import Literal, Union

RoundFormat = Literal["singles", "twoManBestBall", "twoManShamble", "twoManScramble"]
HoleWinner = Literal["teamA", "teamB", "AS"]
Side = Literal["teamA", "teamB"]

FORMATS: tuple[str, ...] = ("singles", "twoManBestBall", "twoManShamble", "twoManScramble")
DEFAULT_FORMAT: RoundFormat = "twoManBestBall"
HOLE_COUNT = 18

Score = Union[int, float, None]
Pair = tuple[Score, Score]


@dataclass(frozen=True)
class SinglesHole:
    team_a_gross: Score = None
    team_b_gross: Score = None


@dataclass(frozen=True)
class ScrambleHole:
    team_a_gross: Score = None
    team_b_gross: Score = None
    team_a_drive: int | None = None
    team_b_drive: int | None = None


@dataclass(frozen=True)
class BestBallHole:
    team_a_gross: Pair = (None, None)
    team_b_gross: Pair = (None, None)


@dataclass(frozen=True)
class ShambleHole:
    team_a_gross: Pair = (None, None)
    team_b_gross: Pair = (None, None)
    team_a_drive: int | None = None
    team_b_drive: int | None = None


HoleInput = Union[SinglesHole, ScrambleHole, BestBallHole, ShambleHole]


@dataclass(frozen=True)
class PlayerSide:
    player_id: str = ""
    strokes_received: tuple[int, ...] = (0,) * HOLE_COUNT

    def strokes_on(self, hole_number: int) -> int:
        index = hole_number - 1
        if 0 <= index < len(self.strokes_received):
            return self.strokes_received[index]
        return 0


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------


def normalize_format(value: object) -> RoundFormat:
    if isinstance(value, str) and value in FORMATS:
        return value  # type: ignore[return-value]
    if value == "fourManScramble":
        return "twoManScramble"
    return DEFAULT_FORMAT


def players_per_side(format: RoundFormat) -> int:
    return 1 if format == "singles" else 2


def is_team_score_format(format: RoundFormat) -> bool:
    return format in ("twoManScramble", "twoManShamble")


def is_individual_format(format: RoundFormat) -> bool:
    return format in ("singles", "twoManBestBall")


def is_two_ball_format(format: RoundFormat) -> bool:
    return format in ("twoManBestBall", "twoManShamble")


def is_score(value: object) -> bool:
    if isinstance(value, bool):
        return False
    if not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def as_score(value: object) -> Score:
    return value if is_score(value) else None  # type: ignore[return-value]


def as_drive(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if value in (0, 1):
        return int(value)  # type: ignore[arg-type]
    return None


def as_stroke(value: object) -> int:
    return 1 if (not isinstance(value, bool) and value == 1) else 0


def as_pair(value: object) -> Pair:
    if not isinstance(value, (list, tuple)):
        return (None, None)
    first = as_score(value[0]) if len(value) > 0 else None
    second = as_score(value[1]) if len(value) > 1 else None
    return (first, second)


def normalize_strokes(value: object) -> tuple[int, ...]:
    if not isinstance(value, (list, tuple)) or len(value) != HOLE_COUNT:
        return (0,) * HOLE_COUNT
    return tuple(as_stroke(item) for item in value)


def parse_side(raw: object, count: int) -> list[PlayerSide]:
    """Normalize a stored team list to exactly ``count`` players."""
    players: list[PlayerSide] = []
    if isinstance(raw, (list, tuple)):
        for item in list(raw)[:count]:
            if isinstance(item, PlayerSide):
                players.append(item)
                continue
            data = item if isinstance(item, dict) else {}
            player_id = data.get("player_id")
            players.append(
                PlayerSide(
                    player_id=player_id if isinstance(player_id, str) else "",
                    strokes_received=normalize_strokes(data.get("strokes_received")),
                )
            )
    while len(players) < count:
        players.append(PlayerSide())
    return players


def parse_hole_input(format: RoundFormat, raw: object) -> HoleInput:
    """Build the format's hole variant from a stored raw dict.

    Unknown keys are ignored and anything that is not a finite number is
    treated as "not entered". A singles hole stored with the team-array
    shape falls back to the first entry of each array.
    """
    data = raw if isinstance(raw, dict) else {}

    if format == "twoManScramble":
        return ScrambleHole(
            team_a_gross=as_score(data.get("team_a_gross")),
            team_b_gross=as_score(data.get("team_b_gross")),
            team_a_drive=as_drive(data.get("team_a_drive")),
            team_b_drive=as_drive(data.get("team_b_drive")),
        )

    if format == "singles":
        a_gross = as_score(data.get("team_a_player_gross"))
        b_gross = as_score(data.get("team_b_player_gross"))
        if a_gross is None:
            a_gross = as_pair(data.get("team_a_players_gross"))[0]
        if b_gross is None:
            b_gross = as_pair(data.get("team_b_players_gross"))[0]
        return SinglesHole(team_a_gross=a_gross, team_b_gross=b_gross)

    if format == "twoManShamble":
        return ShambleHole(
            team_a_gross=as_pair(data.get("team_a_players_gross")),
            team_b_gross=as_pair(data.get("team_b_players_gross")),
            team_a_drive=as_drive(data.get("team_a_drive")),
            team_b_drive=as_drive(data.get("team_b_drive")),
        )

    return BestBallHole(
        team_a_gross=as_pair(data.get("team_a_players_gross")),
        team_b_gross=as_pair(data.get("team_b_players_gross")),
    )


def hole_to_raw(hole: HoleInput) -> dict[str, object]:
    if isinstance(hole, ScrambleHole):
        return {
            "team_a_gross": hole.team_a_gross,
            "team_b_gross": hole.team_b_gross,
            "team_a_drive": hole.team_a_drive,
            "team_b_drive": hole.team_b_drive,
        }
    if isinstance(hole, SinglesHole):
        return {
            "team_a_player_gross": hole.team_a_gross,
            "team_b_player_gross": hole.team_b_gross,
        }
    if isinstance(hole, ShambleHole):
        return {
            "team_a_players_gross": list(hole.team_a_gross),
            "team_b_players_gross": list(hole.team_b_gross),
            "team_a_drive": hole.team_a_drive,
            "team_b_drive": hole.team_b_drive,
        }
    return {
        "team_a_players_gross": list(hole.team_a_gross),
        "team_b_players_gross": list(hole.team_b_gross),
    }


def normalize_holes(format: RoundFormat, raw_holes: object) -> list[dict[str, object]]:
    """Return exactly 18 raw hole dicts shaped for ``format``.

    Accepts either a list (index 0 = hole 1) or a legacy mapping keyed by
    hole number strings "1".."18".
    """
    items: list[object] = [None] * HOLE_COUNT
    if isinstance(raw_holes, dict):
        for key, value in raw_holes.items():
            number = str(key)
            if number.isdigit() and str(int(number)) == number and 1 <= int(number) <= HOLE_COUNT:
                items[int(number) - 1] = value
    elif isinstance(raw_holes, (list, tuple)):
        for index, value in enumerate(list(raw_holes)[:HOLE_COUNT]):
            items[index] = value

    return [hole_to_raw(parse_hole_input(format, item)) for item in items]


def parse_holes(format: RoundFormat, raw_holes: object) -> list[HoleInput]:
    normalized = raw_holes if isinstance(raw_holes, list) and len(raw_holes) == HOLE_COUNT else normalize_holes(format, raw_holes)
    return [parse_hole_input(format, item) for item in normalized]


# ---------------------------------------------------------------------------
# Hole resolution
# ---------------------------------------------------------------------------


def _compare(a_value: float, b_value: float) -> HoleWinner:
    if a_value < b_value:
        return "teamA"
    if b_value < a_value:
        return "teamB"
    return "AS"


def _complete(pair: Pair) -> bool:
    return pair[0] is not None and pair[1] is not None


def decide_hole(
    format: RoundFormat,
    hole_number: int,
    hole: HoleInput,
    side_a: list[PlayerSide],
    side_b: list[PlayerSide],
) -> HoleWinner | None:
    """Return the winner of one hole, or ``None`` while it is undecided.

    Singles and best ball compare net scores (gross minus the hole's
    stroke, per player). Shamble compares the better gross of each pair
    and never looks at strokes. Scramble compares the team gross.
    """
    if isinstance(hole, ScrambleHole):
        if hole.team_a_gross is None or hole.team_b_gross is None:
            return None
        return _compare(hole.team_a_gross, hole.team_b_gross)

    if isinstance(hole, SinglesHole):
        if hole.team_a_gross is None or hole.team_b_gross is None:
            return None
        a_net = hole.team_a_gross - _strokes(side_a, 0, hole_number)
        b_net = hole.team_b_gross - _strokes(side_b, 0, hole_number)
        return _compare(a_net, b_net)

    if not _complete(hole.team_a_gross) or not _complete(hole.team_b_gross):
        return None

    if isinstance(hole, ShambleHole) or format == "twoManShamble":
        return _compare(min(hole.team_a_gross), min(hole.team_b_gross))  # type: ignore[type-var]

    a_nets = net_pair(hole.team_a_gross, side_a, hole_number)
    b_nets = net_pair(hole.team_b_gross, side_b, hole_number)
    return _compare(min(a_nets), min(b_nets))  # type: ignore[type-var]


def _strokes(side: list[PlayerSide], index: int, hole_number: int) -> int:
    if index >= len(side):
        return 0
    return side[index].strokes_on(hole_number)


def net_pair(pair: Pair, side: list[PlayerSide], hole_number: int) -> Pair:
    return tuple(  # type: ignore[return-value]
        None if gross is None else gross - _strokes(side, index, hole_number)
        for index, gross in enumerate(pair)
    )


def decide_holes(
    format: RoundFormat,
    holes: list[HoleInput],
    side_a: list[PlayerSide],
    side_b: list[PlayerSide],
) -> list[HoleWinner | None]:
    return [
        decide_hole(format, number, hole, side_a, side_b)
        for number, hole in enumerate(holes, start=1)
    ]
