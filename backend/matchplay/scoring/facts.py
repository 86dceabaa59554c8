"""Per-player facts derived from a closed match.

One ``PlayerMatchFact`` is produced for every named player once the match
status is closed. Momentum, ball-usage, drive and ham-and-egg tallies only
look at holes up to the hole that decided the match; scoring totals and
the per-hole ledger cover every entered hole.
"""

from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from typing import Literal

from .context import RoundContext, TournamentContext
from .holes import (
    HOLE_COUNT,
    BestBallHole,
    HoleInput,
    HoleWinner,
    Pair,
    PlayerSide,
    RoundFormat,
    ScrambleHole,
    ShambleHole,
    Side,
    SinglesHole,
    decide_holes,
    is_individual_format,
    is_score,
    is_team_score_format,
    is_two_ball_format,
    net_pair,
)
from .summary import MatchState, hole_winner_for

JEKYLL_AND_HYDE_THRESHOLD = 24

Outcome = Literal["win", "loss", "halve"]


@dataclass(frozen=True)
class HolePerformance:
    hole: int
    par: int
    result: Outcome | None = None
    gross: float | None = None
    net: float | None = None
    strokes: int | None = None
    partner_net: float | None = None
    partner_gross: float | None = None
    drive_used: bool | None = None

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class PlayerMatchFact:
    match_id: str
    player_id: str
    tournament_id: str
    round_id: str
    format: RoundFormat
    outcome: Outcome
    points_earned: float

    player_team: Side
    player_team_id: str
    opponent_team_id: str
    player_tier: str
    player_handicap: float | None
    player_course_handicap: float | None
    opponent_ids: tuple[str, ...]
    opponent_tiers: tuple[str, ...]
    opponent_handicaps: tuple[float | None, ...]
    partner_ids: tuple[str, ...]
    partner_tiers: tuple[str, ...]
    partner_handicaps: tuple[float | None, ...]

    holes_won: int
    holes_lost: int
    holes_halved: int
    final_margin: int
    final_thru: int
    winning_hole: int | None

    comeback_win: bool
    blown_lead: bool
    was_never_behind: bool
    lead_changes: int
    strokes_given: int

    decided_on_18: bool
    won_18th_hole: bool | None

    is_captain: bool
    is_co_captain: bool
    captain_vs_captain: bool

    balls_used: int | None = None
    balls_used_solo: int | None = None
    balls_used_shared: int | None = None
    balls_used_solo_won_hole: int | None = None
    balls_used_solo_push: int | None = None
    ball_used_on_18: bool | None = None
    drives_used: int | None = None
    ham_and_egg_count: int | None = None
    best_ball_total: float | None = None
    worst_ball_total: float | None = None
    jekyll_and_hyde: bool = False

    total_gross: float | None = None
    total_net: float | None = None
    strokes_vs_par_gross: float | None = None
    strokes_vs_par_net: float | None = None
    team_total_gross: float | None = None
    team_strokes_vs_par_gross: float | None = None
    holes_played: int = 0
    birdies: int = 0
    eagles: int = 0

    course_id: str = ""
    course_par: int = 72
    day: int = 0
    tournament_year: int = 0
    tournament_name: str = ""
    tournament_series: str = ""

    hole_performance: tuple[HolePerformance, ...] = field(default_factory=tuple)

    @property
    def key(self) -> str:
        return fact_key(self.match_id, self.player_id)

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        for name in (
            "opponent_ids",
            "opponent_tiers",
            "opponent_handicaps",
            "partner_ids",
            "partner_tiers",
            "partner_handicaps",
        ):
            data[name] = list(data[name])
        data["hole_performance"] = [hole.to_dict() for hole in self.hole_performance]
        return data


def fact_key(match_id: str, player_id: str) -> str:
    return f"{match_id}_{player_id}"


# ---------------------------------------------------------------------------
# Match-wide tallies
# ---------------------------------------------------------------------------


@dataclass
class _SideTally:
    never_behind: bool = True
    balls_used: list[int] = field(default_factory=lambda: [0, 0])
    balls_used_solo: list[int] = field(default_factory=lambda: [0, 0])
    balls_used_shared: list[int] = field(default_factory=lambda: [0, 0])
    balls_used_solo_won_hole: list[int] = field(default_factory=lambda: [0, 0])
    balls_used_solo_push: list[int] = field(default_factory=lambda: [0, 0])
    ball_used_on_18: list[bool | None] = field(default_factory=lambda: [None, None])
    drives_used: list[int] = field(default_factory=lambda: [0, 0])
    ham_and_eggs: int = 0
    best_ball_total: float = 0
    worst_ball_total: float = 0

    player_gross: list[float] = field(default_factory=lambda: [0, 0])
    player_net: list[float] = field(default_factory=lambda: [0, 0])
    player_holes: list[int] = field(default_factory=lambda: [0, 0])
    player_birdies: list[int] = field(default_factory=lambda: [0, 0])
    player_eagles: list[int] = field(default_factory=lambda: [0, 0])
    team_total_gross: float = 0


@dataclass
class _MatchTally:
    winning_hole: int | None = None
    margin_into_18: int = 0
    hole_18_result: HoleWinner | None = None
    lead_changes: int = 0
    team_a: _SideTally = field(default_factory=_SideTally)
    team_b: _SideTally = field(default_factory=_SideTally)

    def side(self, side: Side) -> _SideTally:
        return self.team_a if side == "teamA" else self.team_b


def _side_pair(hole: HoleInput, side: Side) -> Pair:
    if isinstance(hole, (BestBallHole, ShambleHole)):
        return hole.team_a_gross if side == "teamA" else hole.team_b_gross
    if isinstance(hole, SinglesHole):
        return ((hole.team_a_gross if side == "teamA" else hole.team_b_gross), None)
    return (None, None)


def _side_drive(hole: HoleInput, side: Side) -> int | None:
    if isinstance(hole, (ScrambleHole, ShambleHole)):
        return hole.team_a_drive if side == "teamA" else hole.team_b_drive
    return None


def _team_gross(hole: HoleInput, side: Side) -> float | None:
    if isinstance(hole, ScrambleHole):
        return hole.team_a_gross if side == "teamA" else hole.team_b_gross
    if isinstance(hole, ShambleHole):
        scores = [score for score in _side_pair(hole, side) if score is not None]
        return min(scores) if scores else None
    return None


def _prescan(decisions: list[HoleWinner | None], closed: bool, tally: _MatchTally) -> None:
    running = 0
    for number, decision in enumerate(decisions, start=1):
        if number == HOLE_COUNT:
            tally.margin_into_18 = running
            tally.hole_18_result = decision
        if decision == "teamA":
            running += 1
        elif decision == "teamB":
            running -= 1
        if decision is not None and closed and tally.winning_hole is None:
            if abs(running) > HOLE_COUNT - number:
                tally.winning_hole = number


def _count_balls(
    tally: _SideTally,
    side: Side,
    scores: Pair,
    decision: HoleWinner | None,
    number: int,
    par: int,
) -> None:
    first, second = scores
    if first is None or second is None:
        return

    if first <= second:
        tally.balls_used[0] += 1
    if second <= first:
        tally.balls_used[1] += 1

    if first == second:
        tally.balls_used_shared[0] += 1
        tally.balls_used_shared[1] += 1
        if number == HOLE_COUNT:
            tally.ball_used_on_18 = [True, True]
    else:
        solo = 0 if first < second else 1
        tally.balls_used_solo[solo] += 1
        if decision == side:
            tally.balls_used_solo_won_hole[solo] += 1
        elif decision == "AS":
            tally.balls_used_solo_push[solo] += 1
        if number == HOLE_COUNT:
            tally.ball_used_on_18 = [solo == 0, solo == 1]

    low, high = min(first, second), max(first, second)
    tally.best_ball_total += low
    tally.worst_ball_total += high
    if low <= par and high >= par + 2:
        tally.ham_and_eggs += 1


def _bounded_pass(
    format: RoundFormat,
    holes: list[HoleInput],
    decisions: list[HoleWinner | None],
    side_a: list[PlayerSide],
    side_b: list[PlayerSide],
    round_ctx: RoundContext,
    tally: _MatchTally,
) -> None:
    last_hole = tally.winning_hole or HOLE_COUNT
    running = 0
    previous_leader: Side | None = None

    for number in range(1, last_hole + 1):
        hole = holes[number - 1]
        decision = decisions[number - 1]

        if decision is not None:
            if decision == "teamA":
                running += 1
            elif decision == "teamB":
                running -= 1
            leader: Side | None = "teamA" if running > 0 else "teamB" if running < 0 else None
            if leader is not None and previous_leader is not None and leader != previous_leader:
                tally.lead_changes += 1
            if leader is not None:
                previous_leader = leader
            if running < 0:
                tally.team_a.never_behind = False
            if running > 0:
                tally.team_b.never_behind = False

        par = round_ctx.par_for(number)
        for side, players in (("teamA", side_a), ("teamB", side_b)):
            side_tally = tally.side(side)  # type: ignore[arg-type]
            if is_two_ball_format(format):
                scores = _side_pair(hole, side)  # type: ignore[arg-type]
                if format == "twoManBestBall":
                    scores = net_pair(scores, players, number)
                _count_balls(side_tally, side, scores, decision, number, par)  # type: ignore[arg-type]
            if is_team_score_format(format):
                drive = _side_drive(hole, side)  # type: ignore[arg-type]
                if drive is not None:
                    side_tally.drives_used[drive] += 1


def _count_under_par(tally: _SideTally, index: int, gross: float, par: int) -> None:
    diff = gross - par
    if diff == -1:
        tally.player_birdies[index] += 1
    elif diff <= -2:
        tally.player_eagles[index] += 1


def _scoring_pass(
    format: RoundFormat,
    holes: list[HoleInput],
    side_a: list[PlayerSide],
    side_b: list[PlayerSide],
    round_ctx: RoundContext,
    tally: _MatchTally,
) -> None:
    for number, hole in enumerate(holes, start=1):
        par = round_ctx.par_for(number)
        for side, players in (("teamA", side_a), ("teamB", side_b)):
            side_tally = tally.side(side)  # type: ignore[arg-type]
            if format == "twoManScramble":
                team_gross = _team_gross(hole, side)  # type: ignore[arg-type]
                if team_gross is not None:
                    side_tally.team_total_gross += team_gross
                    side_tally.player_holes[0] += 1
                    side_tally.player_holes[1] += 1
                    _count_under_par(side_tally, 0, team_gross, par)
                    _count_under_par(side_tally, 1, team_gross, par)
                continue

            scores = _side_pair(hole, side)  # type: ignore[arg-type]
            for index, gross in enumerate(scores):
                if gross is None:
                    continue
                side_tally.player_gross[index] += gross
                side_tally.player_holes[index] += 1
                if index < len(players):
                    side_tally.player_net[index] += gross - players[index].strokes_on(number)
                _count_under_par(side_tally, index, gross, par)

            if format == "twoManShamble":
                team_gross = _team_gross(hole, side)  # type: ignore[arg-type]
                if team_gross is not None:
                    side_tally.team_total_gross += team_gross


# ---------------------------------------------------------------------------
# Per-player derivation
# ---------------------------------------------------------------------------


def _decided_on_18(tally: _MatchTally, side: Side, final_thru: int) -> tuple[bool, bool | None]:
    went_to_18 = final_thru == HOLE_COUNT and tally.winning_hole in (None, HOLE_COUNT)
    result = tally.hole_18_result
    if not went_to_18 or result is None or result == "AS":
        return False, None

    won = result == side
    margin = tally.margin_into_18
    if margin == 0:
        return True, won
    if abs(margin) == 1:
        trailing: Side = "teamB" if margin > 0 else "teamA"
        if result == trailing:
            return True, won
    return False, None


def _course_handicap_index(format: RoundFormat, side: Side, index: int) -> int:
    if format == "singles":
        return 0 if side == "teamA" else 1
    return index if side == "teamA" else index + 2


def _hole_performance(
    format: RoundFormat,
    holes: list[HoleInput],
    decisions: list[HoleWinner | None],
    side: Side,
    index: int,
    players: list[PlayerSide],
    round_ctx: RoundContext,
) -> tuple[HolePerformance, ...]:
    ledger: list[HolePerformance] = []
    player = players[index]
    partner_index = 1 - index

    for number, hole in enumerate(holes, start=1):
        par = round_ctx.par_for(number)
        result = hole_winner_for(side, decisions[number - 1])

        if format == "twoManScramble":
            drive = _side_drive(hole, side)
            ledger.append(
                HolePerformance(
                    hole=number,
                    par=par,
                    result=result,
                    gross=_team_gross(hole, side),
                    drive_used=drive == index,
                )
            )
            continue

        scores = _side_pair(hole, side)
        gross = scores[index] if index < 2 else None

        if format == "twoManShamble":
            drive = _side_drive(hole, side)
            ledger.append(
                HolePerformance(
                    hole=number,
                    par=par,
                    result=result,
                    gross=gross,
                    partner_gross=scores[partner_index],
                    drive_used=drive == index,
                )
            )
            continue

        strokes = player.strokes_on(number)
        partner_net = None
        if format == "twoManBestBall" and partner_index < len(players):
            partner_gross = scores[partner_index]
            if partner_gross is not None:
                partner_net = partner_gross - players[partner_index].strokes_on(number)
        ledger.append(
            HolePerformance(
                hole=number,
                par=par,
                result=result,
                gross=gross,
                net=None if gross is None else gross - strokes,
                strokes=strokes if gross is not None else None,
                partner_net=partner_net,
            )
        )

    return tuple(ledger)


def _identities(
    players: Sequence[PlayerSide],
    tournament_ctx: TournamentContext,
    exclude: str = "",
) -> tuple[tuple[str, ...], tuple[str, ...], tuple[float | None, ...]]:
    ids = tuple(p.player_id for p in players if p.player_id and p.player_id != exclude)
    return (
        ids,
        tuple(tournament_ctx.tier_of(player_id) for player_id in ids),
        tuple(tournament_ctx.handicap_of(player_id) for player_id in ids),
    )


def build_match_facts(
    match_id: str,
    holes: list[HoleInput],
    side_a: list[PlayerSide],
    side_b: list[PlayerSide],
    state: MatchState,
    round_ctx: RoundContext | None = None,
    tournament_ctx: TournamentContext | None = None,
    course_handicaps: Sequence[object] = (),
) -> list[PlayerMatchFact]:
    """Derive one fact per named player; empty while the match is open."""
    if not state.status.closed:
        return []

    round_ctx = round_ctx or RoundContext()
    tournament_ctx = tournament_ctx or TournamentContext()
    format = round_ctx.format
    holes = list(holes[:HOLE_COUNT])
    while len(holes) < HOLE_COUNT:
        holes.append(BestBallHole())

    decisions = decide_holes(format, holes, side_a, side_b)
    tally = _MatchTally()
    _prescan(decisions, state.status.closed, tally)
    _bounded_pass(format, holes, decisions, side_a, side_b, round_ctx, tally)
    _scoring_pass(format, holes, side_a, side_b, round_ctx, tally)

    last_hole = tally.winning_hole or HOLE_COUNT
    halved = sum(1 for decision in decisions[:last_hole] if decision == "AS")
    status = state.status
    result = state.result
    points_value = round_ctx.points_value

    facts: list[PlayerMatchFact] = []
    for side, players, opponents in (("teamA", side_a, side_b), ("teamB", side_b, side_a)):
        side_tally = tally.side(side)  # type: ignore[arg-type]
        opponent_side: Side = "teamB" if side == "teamA" else "teamA"
        my_team = tournament_ctx.team(side)  # type: ignore[arg-type]
        their_team = tournament_ctx.team(opponent_side)

        if result.winner == "AS":
            outcome: Outcome = "halve"
            points = points_value / 2
        elif result.winner == side:
            outcome = "win"
            points = points_value
        else:
            outcome = "loss"
            points = 0

        holes_won = result.holes_won_a if side == "teamA" else result.holes_won_b
        holes_lost = result.holes_won_b if side == "teamA" else result.holes_won_a
        was_down = status.was_team_a_down_3_plus_back9 if side == "teamA" else status.was_team_a_up_3_plus_back9
        was_up = status.was_team_a_up_3_plus_back9 if side == "teamA" else status.was_team_a_down_3_plus_back9
        decided_on_18, won_18th = _decided_on_18(tally, side, status.thru)  # type: ignore[arg-type]
        opponent_ids, opponent_tiers, opponent_handicaps = _identities(opponents, tournament_ctx)
        jekyll = (
            is_two_ball_format(format)
            and side_tally.worst_ball_total - side_tally.best_ball_total >= JEKYLL_AND_HYDE_THRESHOLD
        )

        for index, player in enumerate(players):
            if not player.player_id:
                continue

            partner_ids, partner_tiers, partner_handicaps = _identities(
                players, tournament_ctx, exclude=player.player_id
            )
            is_captain = bool(my_team.captain_id) and player.player_id == my_team.captain_id
            is_co_captain = bool(my_team.co_captain_id) and player.player_id == my_team.co_captain_id

            ch_index = _course_handicap_index(format, side, index)  # type: ignore[arg-type]
            course_handicap = course_handicaps[ch_index] if ch_index < len(course_handicaps) else None
            if not is_score(course_handicap):
                course_handicap = None

            fields: dict[str, object] = {}
            if is_two_ball_format(format):
                fields.update(
                    balls_used=side_tally.balls_used[index],
                    balls_used_solo=side_tally.balls_used_solo[index],
                    balls_used_shared=side_tally.balls_used_shared[index],
                    balls_used_solo_won_hole=side_tally.balls_used_solo_won_hole[index],
                    balls_used_solo_push=side_tally.balls_used_solo_push[index],
                    ball_used_on_18=side_tally.ball_used_on_18[index],
                    ham_and_egg_count=side_tally.ham_and_eggs,
                    best_ball_total=side_tally.best_ball_total,
                    worst_ball_total=side_tally.worst_ball_total,
                )
            if is_team_score_format(format):
                fields.update(
                    drives_used=side_tally.drives_used[index],
                    team_total_gross=side_tally.team_total_gross,
                    team_strokes_vs_par_gross=side_tally.team_total_gross - round_ctx.course_par,
                )
            if is_individual_format(format):
                total_gross = side_tally.player_gross[index]
                if course_handicap is not None:
                    total_net = total_gross - course_handicap
                else:
                    total_net = side_tally.player_net[index]
                fields.update(
                    total_gross=total_gross,
                    total_net=total_net,
                    strokes_vs_par_gross=total_gross - round_ctx.course_par,
                    strokes_vs_par_net=total_net - round_ctx.course_par,
                )

            facts.append(
                PlayerMatchFact(
                    match_id=match_id,
                    player_id=player.player_id,
                    tournament_id=tournament_ctx.tournament_id,
                    round_id=round_ctx.round_id,
                    format=format,
                    outcome=outcome,
                    points_earned=points,
                    player_team=side,  # type: ignore[arg-type]
                    player_team_id=my_team.team_id,
                    opponent_team_id=their_team.team_id,
                    player_tier=tournament_ctx.tier_of(player.player_id),
                    player_handicap=tournament_ctx.handicap_of(player.player_id),
                    player_course_handicap=course_handicap,  # type: ignore[arg-type]
                    opponent_ids=opponent_ids,
                    opponent_tiers=opponent_tiers,
                    opponent_handicaps=opponent_handicaps,
                    partner_ids=partner_ids,
                    partner_tiers=partner_tiers,
                    partner_handicaps=partner_handicaps,
                    holes_won=holes_won,
                    holes_lost=holes_lost,
                    holes_halved=halved,
                    final_margin=status.margin,
                    final_thru=status.thru,
                    winning_hole=tally.winning_hole,
                    comeback_win=outcome == "win" and was_down,
                    blown_lead=outcome == "loss" and was_up,
                    was_never_behind=side_tally.never_behind,
                    lead_changes=tally.lead_changes,
                    strokes_given=sum(player.strokes_received),
                    decided_on_18=decided_on_18,
                    won_18th_hole=won_18th,
                    is_captain=is_captain,
                    is_co_captain=is_co_captain,
                    captain_vs_captain=is_captain
                    and bool(their_team.captain_id)
                    and their_team.captain_id in opponent_ids,
                    jekyll_and_hyde=jekyll,
                    holes_played=side_tally.player_holes[index],
                    birdies=side_tally.player_birdies[index],
                    eagles=side_tally.player_eagles[index],
                    course_id=round_ctx.course_id,
                    course_par=round_ctx.course_par,
                    day=round_ctx.day,
                    tournament_year=tournament_ctx.year,
                    tournament_name=tournament_ctx.name,
                    tournament_series=tournament_ctx.series,
                    hole_performance=_hole_performance(
                        format, holes, decisions, side, index, players, round_ctx  # type: ignore[arg-type]
                    ),
                    **fields,  # type: ignore[arg-type]
                )
            )

    return facts


_TUPLE_FIELDS = (
    "opponent_ids",
    "opponent_tiers",
    "opponent_handicaps",
    "partner_ids",
    "partner_tiers",
    "partner_handicaps",
)


def fact_from_dict(data: dict) -> PlayerMatchFact:
    """Rebuild a fact from its stored ``to_dict`` form."""
    known = {name for name in PlayerMatchFact.__dataclass_fields__}
    values = {key: value for key, value in data.items() if key in known}
    for name in _TUPLE_FIELDS:
        values[name] = tuple(values.get(name) or ())
    values["hole_performance"] = tuple(
        HolePerformance(**hole) for hole in values.get("hole_performance") or ()
    )
    return PlayerMatchFact(**values)
