from dataclasses import asdict, dataclass, field
from typing import Literal

from .holes import (
    HOLE_COUNT,
    HoleInput,
    HoleWinner,
    PlayerSide,
    RoundFormat,
    Side,
    decide_hole,
)

COMEBACK_THRESHOLD = 3
BACK_NINE_START = 9

MatchWinner = Literal["teamA", "teamB", "AS"]


@dataclass(frozen=True)
class MatchStatus:
    leader: Side | None = None
    margin: int = 0
    thru: int = 0
    dormie: bool = False
    closed: bool = False
    was_team_a_down_3_plus_back9: bool = False
    was_team_a_up_3_plus_back9: bool = False
    margin_history: tuple[int, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        data["margin_history"] = list(self.margin_history)
        return data


@dataclass(frozen=True)
class MatchResult:
    winner: MatchWinner = "AS"
    holes_won_a: int = 0
    holes_won_b: int = 0

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class MatchState:
    status: MatchStatus
    result: MatchResult

    @property
    def score_line(self) -> str:
        return score_line(self.status)


def default_status() -> MatchStatus:
    return MatchStatus()


def status_from_dict(data: object) -> MatchStatus:
    if not isinstance(data, dict):
        return MatchStatus()
    leader = data.get("leader")
    history = data.get("margin_history")
    return MatchStatus(
        leader=leader if leader in ("teamA", "teamB") else None,
        margin=int(data.get("margin") or 0),
        thru=int(data.get("thru") or 0),
        dormie=bool(data.get("dormie")),
        closed=bool(data.get("closed")),
        was_team_a_down_3_plus_back9=bool(data.get("was_team_a_down_3_plus_back9")),
        was_team_a_up_3_plus_back9=bool(data.get("was_team_a_up_3_plus_back9")),
        margin_history=tuple(int(item) for item in history) if isinstance(history, list) else (),
    )


def result_from_dict(data: object) -> MatchResult:
    if not isinstance(data, dict):
        return MatchResult()
    winner = data.get("winner")
    return MatchResult(
        winner=winner if winner in ("teamA", "teamB", "AS") else "AS",
        holes_won_a=int(data.get("holes_won_a") or 0),
        holes_won_b=int(data.get("holes_won_b") or 0),
    )


def summarize(
    format: RoundFormat,
    holes: list[HoleInput],
    side_a: list[PlayerSide],
    side_b: list[PlayerSide],
) -> MatchState:
    """Fold the hole decisions 1..18 into the running match state.

    Undecided holes are skipped but a later decided hole still advances
    ``thru``. Once the lead exceeds the holes remaining the match is
    closed and any later holes are ignored.
    """
    won_a = 0
    won_b = 0
    thru = 0
    running = 0
    history: list[int] = []
    down_3_back9 = False
    up_3_back9 = False

    for number, hole in enumerate(holes[:HOLE_COUNT], start=1):
        decision = decide_hole(format, number, hole, side_a, side_b)
        if decision is None:
            continue

        thru = number
        if decision == "teamA":
            won_a += 1
            running += 1
        elif decision == "teamB":
            won_b += 1
            running -= 1
        history.append(running)

        if number >= BACK_NINE_START:
            if running <= -COMEBACK_THRESHOLD:
                down_3_back9 = True
            if running >= COMEBACK_THRESHOLD:
                up_3_back9 = True

        if abs(running) > HOLE_COUNT - thru:
            break

    return build_state(won_a, won_b, thru, tuple(history), down_3_back9, up_3_back9)


def build_state(
    won_a: int,
    won_b: int,
    thru: int,
    history: tuple[int, ...] = (),
    down_3_back9: bool = False,
    up_3_back9: bool = False,
) -> MatchState:
    leader: Side | None = "teamA" if won_a > won_b else "teamB" if won_b > won_a else None
    margin = abs(won_a - won_b)
    holes_left = HOLE_COUNT - thru
    closed = (leader is not None and margin > holes_left) or thru == HOLE_COUNT
    dormie = leader is not None and margin == holes_left and thru < HOLE_COUNT
    winner: MatchWinner = "AS" if (thru == HOLE_COUNT and won_a == won_b) else (leader or "AS")

    status = MatchStatus(
        leader=leader,
        margin=margin,
        thru=thru,
        dormie=dormie,
        closed=closed,
        was_team_a_down_3_plus_back9=down_3_back9,
        was_team_a_up_3_plus_back9=up_3_back9,
        margin_history=history,
    )
    return MatchState(status=status, result=MatchResult(winner=winner, holes_won_a=won_a, holes_won_b=won_b))


def score_line(status: MatchStatus) -> str:
    if status.leader is None:
        return "AS"
    holes_left = HOLE_COUNT - status.thru
    if status.closed and holes_left > 0:
        return f"{status.margin}&{holes_left}"
    return f"{status.margin} UP"


def hole_winner_for(side: Side, decision: HoleWinner | None) -> Literal["win", "loss", "halve"] | None:
    if decision is None:
        return None
    if decision == "AS":
        return "halve"
    return "win" if decision == side else "loss"
