"""Read-only lookup context handed to the fact builder.

Built once per recompute from the stored tournament, round and course
rows. Every field has a default so a missing row degrades to par 72,
"Unknown" tiers and no handicaps.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .holes import DEFAULT_FORMAT, HOLE_COUNT, RoundFormat, Side, is_score, normalize_format
from .strokes import DEFAULT_COURSE_PAR, CourseHole, default_course_holes

UNKNOWN_TIER = "Unknown"


def _frozen(mapping: Mapping | None) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class TeamContext:
    team_id: str
    captain_id: str = ""
    co_captain_id: str = ""


@dataclass(frozen=True)
class TournamentContext:
    tournament_id: str = ""
    name: str = ""
    year: int = 0
    series: str = ""
    team_a: TeamContext = field(default_factory=lambda: TeamContext(team_id="teamA"))
    team_b: TeamContext = field(default_factory=lambda: TeamContext(team_id="teamB"))
    tier_by_player: Mapping[str, str] = field(default_factory=lambda: _frozen(None))
    handicap_by_player: Mapping[str, float] = field(default_factory=lambda: _frozen(None))

    def team(self, side: Side) -> TeamContext:
        return self.team_a if side == "teamA" else self.team_b

    def tier_of(self, player_id: str) -> str:
        return self.tier_by_player.get(player_id) or UNKNOWN_TIER

    def handicap_of(self, player_id: str) -> float | None:
        return self.handicap_by_player.get(player_id)


@dataclass(frozen=True)
class RoundContext:
    round_id: str = ""
    format: RoundFormat = DEFAULT_FORMAT
    points_value: float = 1
    day: int = 0
    course_id: str = ""
    course_par: int = DEFAULT_COURSE_PAR
    course_holes: tuple[CourseHole, ...] = field(default_factory=lambda: tuple(default_course_holes()))

    def par_for(self, hole_number: int) -> int:
        for hole in self.course_holes:
            if hole.number == hole_number:
                return hole.par
        return 4


def flatten_rosters(*rosters: object) -> dict[str, str]:
    """Turn ``{tier: [player ids]}`` maps into ``{player id: tier}``."""
    lookup: dict[str, str] = {}
    for roster in rosters:
        if not isinstance(roster, Mapping):
            continue
        for tier, player_ids in roster.items():
            if not isinstance(player_ids, (list, tuple)):
                continue
            for player_id in player_ids:
                if isinstance(player_id, str) and player_id:
                    lookup[player_id] = str(tier)
    return lookup


def flatten_handicaps(*handicap_maps: object) -> dict[str, float]:
    lookup: dict[str, float] = {}
    for handicaps in handicap_maps:
        if not isinstance(handicaps, Mapping):
            continue
        for player_id, value in handicaps.items():
            if is_score(value):
                lookup[str(player_id)] = value
    return lookup


def build_tournament_context(
    tournament_id: str = "",
    name: str = "",
    year: int = 0,
    series: str = "",
    team_a: Mapping | None = None,
    team_b: Mapping | None = None,
) -> TournamentContext:
    team_a = team_a or {}
    team_b = team_b or {}

    def team_context(data: Mapping, fallback_id: str) -> TeamContext:
        return TeamContext(
            team_id=str(data.get("id") or fallback_id),
            captain_id=str(data.get("captain_id") or ""),
            co_captain_id=str(data.get("co_captain_id") or ""),
        )

    return TournamentContext(
        tournament_id=tournament_id or "",
        name=name or "",
        year=year or 0,
        series=series or "",
        team_a=team_context(team_a, "teamA"),
        team_b=team_context(team_b, "teamB"),
        tier_by_player=_frozen(flatten_rosters(team_a.get("roster_by_tier"), team_b.get("roster_by_tier"))),
        handicap_by_player=_frozen(
            flatten_handicaps(team_a.get("handicap_by_player"), team_b.get("handicap_by_player"))
        ),
    )


def parse_course_holes(raw: object) -> tuple[CourseHole, ...]:
    if not isinstance(raw, (list, tuple)) or not raw:
        return tuple(default_course_holes())

    holes: list[CourseHole] = []
    for position, item in enumerate(raw, start=1):
        data = item if isinstance(item, Mapping) else {}
        number = data.get("number")
        par = data.get("par")
        hcp_index = data.get("hcp_index")
        holes.append(
            CourseHole(
                number=int(number) if is_score(number) and number else position,
                par=int(par) if is_score(par) and par else 4,
                hcp_index=int(hcp_index) if is_score(hcp_index) else 0,
            )
        )
    return tuple(holes)


def build_round_context(
    round_id: str = "",
    format: object = None,
    points_value: object = 1,
    day: object = 0,
    course_id: str = "",
    course_par: object = None,
    course_holes: object = None,
) -> RoundContext:
    holes = parse_course_holes(course_holes)
    if is_score(course_par) and course_par:
        par = int(course_par)  # type: ignore[arg-type]
    elif isinstance(course_holes, (list, tuple)) and len(course_holes) == HOLE_COUNT:
        par = sum(hole.par for hole in holes)
    else:
        par = DEFAULT_COURSE_PAR

    return RoundContext(
        round_id=round_id or "",
        format=normalize_format(format),
        points_value=points_value if is_score(points_value) else 1,  # type: ignore[arg-type]
        day=int(day) if is_score(day) else 0,  # type: ignore[arg-type]
        course_id=course_id or "",
        course_par=par,
        course_holes=holes,
    )
