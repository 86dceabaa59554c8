"""Skins side game across every match of a round.

A skin is won by the single lowest score on a hole across the whole
field. Net skins use their own stroke allowance (see
``strokes.skins_strokes``), not the match-play strokes.
"""

from collections.abc import Sequence
from dataclasses import asdict, dataclass, field

from .holes import HOLE_COUNT, HoleInput, PlayerSide, RoundFormat, Score, SinglesHole, is_score

SKINS_FORMATS: tuple[str, ...] = ("singles", "twoManBestBall")


@dataclass(frozen=True)
class SkinsPlayer:
    player_id: str
    gross: tuple[Score, ...]
    strokes: tuple[int, ...] = (0,) * HOLE_COUNT


@dataclass(frozen=True)
class PlayerHoleScore:
    player_id: str
    gross: Score
    net: Score
    has_stroke: bool
    player_thru: int


@dataclass(frozen=True)
class HoleSkin:
    hole_number: int
    par: int
    gross_winner: str | None
    net_winner: str | None
    gross_low_score: Score
    net_low_score: Score
    gross_tied_count: int
    net_tied_count: int
    all_players_completed: bool
    scores: tuple[PlayerHoleScore, ...] = ()


@dataclass
class PlayerSkinsTotal:
    player_id: str
    gross_skins_won: int = 0
    net_skins_won: int = 0
    gross_holes: list[int] = field(default_factory=list)
    net_holes: list[int] = field(default_factory=list)
    gross_earnings: float = 0
    net_earnings: float = 0

    @property
    def total_earnings(self) -> float:
        return self.gross_earnings + self.net_earnings


@dataclass(frozen=True)
class SkinsResult:
    holes: tuple[HoleSkin, ...]
    player_totals: tuple[PlayerSkinsTotal, ...]
    gross_pot: float
    net_pot: float

    def to_dict(self) -> dict[str, object]:
        return {
            "holes": [asdict(hole) for hole in self.holes],
            "player_totals": [
                {**asdict(total), "total_earnings": total.total_earnings} for total in self.player_totals
            ],
            "gross_pot": self.gross_pot,
            "net_pot": self.net_pot,
        }


def skins_enabled(format: RoundFormat, gross_pot: object, net_pot: object) -> bool:
    has_pot = (is_score(gross_pot) and gross_pot > 0) or (is_score(net_pot) and net_pot > 0)  # type: ignore[operator]
    return format in SKINS_FORMATS and has_pot


def collect_gross(holes: Sequence[HoleInput], side: str, index: int) -> tuple[Score, ...]:
    """One player's gross scores for holes 1..18 from a match's hole list."""
    scores: list[Score] = []
    for hole in list(holes)[:HOLE_COUNT]:
        if isinstance(hole, SinglesHole):
            scores.append(hole.team_a_gross if side == "teamA" else hole.team_b_gross)
            continue
        pair = getattr(hole, "team_a_gross" if side == "teamA" else "team_b_gross", (None, None))
        if isinstance(pair, tuple) and index < len(pair):
            scores.append(pair[index])
        else:
            scores.append(None)
    while len(scores) < HOLE_COUNT:
        scores.append(None)
    return tuple(scores)


def players_from_match(
    holes: Sequence[HoleInput],
    side_a: Sequence[PlayerSide],
    side_b: Sequence[PlayerSide],
) -> list[tuple[str, tuple[Score, ...]]]:
    players = []
    for side, members in (("teamA", side_a), ("teamB", side_b)):
        for index, member in enumerate(members):
            if member.player_id:
                players.append((member.player_id, collect_gross(holes, side, index)))
    return players


def _low(values: list[tuple[str, float]]) -> tuple[str | None, Score, int]:
    if not values:
        return None, None, 0
    low = min(score for _, score in values)
    holders = [player_id for player_id, score in values if score == low]
    if len(holders) == 1:
        return holders[0], low, 0
    return None, low, len(holders)


def compute_skins(
    players: Sequence[SkinsPlayer],
    pars: Sequence[int],
    gross_pot: float = 0,
    net_pot: float = 0,
) -> SkinsResult:
    holes: list[HoleSkin] = []
    totals = {player.player_id: PlayerSkinsTotal(player_id=player.player_id) for player in players}
    thru = {
        player.player_id: sum(1 for score in player.gross if is_score(score)) for player in players
    }

    for number in range(1, HOLE_COUNT + 1):
        par = pars[number - 1] if number - 1 < len(pars) else 4
        scores: list[PlayerHoleScore] = []
        gross_values: list[tuple[str, float]] = []
        net_values: list[tuple[str, float]] = []

        for player in players:
            gross = player.gross[number - 1] if number - 1 < len(player.gross) else None
            stroke = player.strokes[number - 1] if number - 1 < len(player.strokes) else 0
            if not is_score(gross):
                gross = None
            net = None if gross is None else gross - stroke
            scores.append(
                PlayerHoleScore(
                    player_id=player.player_id,
                    gross=gross,
                    net=net,
                    has_stroke=stroke > 0,
                    player_thru=thru[player.player_id],
                )
            )
            if gross is not None:
                gross_values.append((player.player_id, gross))
                net_values.append((player.player_id, net))  # type: ignore[arg-type]

        completed = bool(players) and len(gross_values) == len(players)
        gross_winner, gross_low, gross_ties = _low(gross_values)
        net_winner, net_low, net_ties = _low(net_values)
        if not completed:
            gross_winner = None
            net_winner = None

        if gross_winner is not None:
            totals[gross_winner].gross_skins_won += 1
            totals[gross_winner].gross_holes.append(number)
        if net_winner is not None:
            totals[net_winner].net_skins_won += 1
            totals[net_winner].net_holes.append(number)

        holes.append(
            HoleSkin(
                hole_number=number,
                par=par,
                gross_winner=gross_winner,
                net_winner=net_winner,
                gross_low_score=gross_low,
                net_low_score=net_low,
                gross_tied_count=gross_ties,
                net_tied_count=net_ties,
                all_players_completed=completed,
                scores=tuple(scores),
            )
        )

    gross_skins = sum(total.gross_skins_won for total in totals.values())
    net_skins = sum(total.net_skins_won for total in totals.values())
    for total in totals.values():
        if gross_skins:
            total.gross_earnings = gross_pot * total.gross_skins_won / gross_skins
        if net_skins:
            total.net_earnings = net_pot * total.net_skins_won / net_skins

    ranked = sorted(totals.values(), key=lambda total: (-total.total_earnings, total.player_id))
    return SkinsResult(holes=tuple(holes), player_totals=tuple(ranked), gross_pot=gross_pot, net_pot=net_pot)
