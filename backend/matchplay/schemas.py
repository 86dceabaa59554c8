from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ORMBaseModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


RoundFormat = Literal["singles", "twoManBestBall", "twoManShamble", "twoManScramble"]
ScopeType = Literal["series", "tournament", "round"]
GrossScore = int | None


# ---------------------------------------------------------------------------
# Tournaments, courses, rounds
# ---------------------------------------------------------------------------


class TeamSetup(BaseModel):
    id: str = Field(default="", max_length=64)
    name: str = Field(default="", max_length=100)
    captain_id: str = Field(default="", max_length=64)
    co_captain_id: str = Field(default="", max_length=64)
    roster_by_tier: dict[str, list[str]] = Field(default_factory=dict)
    handicap_by_player: dict[str, float] = Field(default_factory=dict)


class TournamentCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    year: int = Field(default=0, ge=0)
    series: str = Field(default="", max_length=64)
    team_a: TeamSetup | None = None
    team_b: TeamSetup | None = None


class TournamentRead(ORMBaseModel):
    id: int
    name: str
    year: int
    series: str
    team_a: dict[str, Any]
    team_b: dict[str, Any]
    round_ids: list[int] = Field(default_factory=list)


class CourseHoleIn(BaseModel):
    number: int = Field(ge=1, le=18)
    par: int = Field(ge=3, le=6)
    hcp_index: int = Field(ge=1, le=18)


class CourseCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    par: int | None = Field(default=None, ge=54, le=90)
    slope_rating: float = Field(default=113, ge=55, le=155)
    course_rating: float | None = Field(default=None, ge=50, le=90)
    holes: list[CourseHoleIn] = Field(default_factory=list)


class CourseRead(ORMBaseModel):
    id: int
    name: str
    par: int
    slope_rating: float
    course_rating: float | None = None
    holes: list[dict[str, Any]] = Field(default_factory=list)


class RoundCreate(BaseModel):
    tournament_id: int = Field(gt=0)
    course_id: int | None = Field(default=None, gt=0)
    format: RoundFormat
    day: int = Field(default=0, ge=0)
    points_value: float = Field(default=1, ge=0)
    skins_gross_pot: float = Field(default=0, ge=0)
    skins_net_pot: float = Field(default=0, ge=0)
    skins_handicap_percent: float = Field(default=100, ge=0, le=100)


class RoundRead(ORMBaseModel):
    id: int
    tournament_id: int
    course_id: int | None = None
    format: RoundFormat
    day: int
    points_value: float
    skins_gross_pot: float
    skins_net_pot: float
    skins_handicap_percent: float
    match_ids: list[int] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Matches
# ---------------------------------------------------------------------------


class PlayerSideIn(BaseModel):
    player_id: str = Field(default="", max_length=64)
    strokes_received: list[int] | None = None


class MatchCreate(BaseModel):
    round_id: int = Field(gt=0)
    team_a_players: list[PlayerSideIn] = Field(default_factory=list)
    team_b_players: list[PlayerSideIn] = Field(default_factory=list)
    course_handicaps: list[float] | None = None
    # Team A players first, then team B; strokes are allocated from these.
    handicap_indexes: list[float] | None = None
    holes: list[dict[str, Any]] | dict[str, Any] | None = None


class HoleUpdate(BaseModel):
    team_a_gross: GrossScore = Field(default=None, ge=1, le=20)
    team_b_gross: GrossScore = Field(default=None, ge=1, le=20)
    team_a_drive: int | None = Field(default=None, ge=0, le=1)
    team_b_drive: int | None = Field(default=None, ge=0, le=1)
    team_a_player_gross: GrossScore = Field(default=None, ge=1, le=20)
    team_b_player_gross: GrossScore = Field(default=None, ge=1, le=20)
    team_a_players_gross: list[GrossScore] | None = Field(default=None, min_length=2, max_length=2)
    team_b_players_gross: list[GrossScore] | None = Field(default=None, min_length=2, max_length=2)


class MatchStatusRead(BaseModel):
    leader: Literal["teamA", "teamB"] | None = None
    margin: int = 0
    thru: int = 0
    dormie: bool = False
    closed: bool = False
    was_team_a_down_3_plus_back9: bool = False
    was_team_a_up_3_plus_back9: bool = False
    margin_history: list[int] = Field(default_factory=list)


class MatchResultRead(BaseModel):
    winner: Literal["teamA", "teamB", "AS"] = "AS"
    holes_won_a: int = 0
    holes_won_b: int = 0


class MatchRead(BaseModel):
    id: int
    round_id: int
    tournament_id: int
    format: RoundFormat

    holes: list[dict[str, Any]]
    team_a_players: list[dict[str, Any]]
    team_b_players: list[dict[str, Any]]
    course_handicaps: list[float] = Field(default_factory=list)

    status: MatchStatusRead
    result: MatchResultRead
    score_line: str


class RecomputeResponse(BaseModel):
    recomputed: bool
    match: MatchRead


class FactRead(BaseModel):
    id: str
    match_id: int
    player_id: str
    data: dict[str, Any]


# ---------------------------------------------------------------------------
# Stats, skins, admin
# ---------------------------------------------------------------------------


class PlayerStatsRead(BaseModel):
    player_id: str
    scope_type: ScopeType
    scope_key: str
    stats: dict[str, Any]


class LeaderboardRow(BaseModel):
    rank: int
    player_id: str
    matches_played: int
    wins: int
    losses: int
    halves: int
    points: float
    points_per_match: float


class SkinsRead(BaseModel):
    round_id: int
    enabled: bool
    gross_pot: float = 0
    net_pot: float = 0
    holes: list[dict[str, Any]] = Field(default_factory=list)
    player_totals: list[dict[str, Any]] = Field(default_factory=list)


class AdminRecomputeReport(BaseModel):
    dry_run: bool
    matches_scanned: int
    matches_changed: int
    facts_written: int = 0
    facts_deleted: int = 0
    changed_match_ids: list[int] = Field(default_factory=list)
