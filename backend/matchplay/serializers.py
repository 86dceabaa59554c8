from . import models, schemas
from .scoring.summary import MatchState, result_from_dict, status_from_dict


def match_to_read(match: models.Match) -> schemas.MatchRead:
    status = status_from_dict(match.status)
    result = result_from_dict(match.result)

    return schemas.MatchRead(
        id=match.id,
        round_id=match.round_id,
        tournament_id=match.tournament_id,
        format=match.format,
        holes=list(match.holes or []),
        team_a_players=list(match.team_a_players or []),
        team_b_players=list(match.team_b_players or []),
        course_handicaps=list(match.course_handicaps or []),
        status=schemas.MatchStatusRead(**status.to_dict()),
        result=schemas.MatchResultRead(**result.to_dict()),
        score_line=MatchState(status=status, result=result).score_line,
    )


def fact_to_read(fact: models.PlayerMatchFact) -> schemas.FactRead:
    return schemas.FactRead(
        id=fact.id,
        match_id=fact.match_id,
        player_id=fact.player_id,
        data=dict(fact.data or {}),
    )


def stats_to_read(row: models.PlayerStats) -> schemas.PlayerStatsRead:
    return schemas.PlayerStatsRead(
        player_id=row.player_id,
        scope_type=row.scope_type,
        scope_key=row.scope_key,
        stats=dict(row.data or {}),
    )


def leaderboard_rows(rows: list[models.PlayerStats]) -> list[schemas.LeaderboardRow]:
    def sort_key(row: models.PlayerStats) -> tuple[float, float, int, str]:
        data = row.data or {}
        return (
            -float(data.get("points", 0)),
            -float(data.get("points_per_match", 0)),
            -int(data.get("wins", 0)),
            row.player_id,
        )

    ranked: list[schemas.LeaderboardRow] = []
    for index, row in enumerate(sorted(rows, key=sort_key), start=1):
        data = row.data or {}
        ranked.append(
            schemas.LeaderboardRow(
                rank=index,
                player_id=row.player_id,
                matches_played=int(data.get("matches_played", 0)),
                wins=int(data.get("wins", 0)),
                losses=int(data.get("losses", 0)),
                halves=int(data.get("halves", 0)),
                points=float(data.get("points", 0)),
                points_per_match=float(data.get("points_per_match", 0)),
            )
        )
    return ranked
