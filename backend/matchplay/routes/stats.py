from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import crud, schemas, serializers
from ..database import get_db

router = APIRouter(tags=["stats"])


@router.get("/players/{player_id}", response_model=schemas.PlayerStatsRead)
def get_player_stats(
    player_id: str,
    scope_type: schemas.ScopeType = Query(default="tournament"),
    scope_key: str = Query(min_length=1),
    db: Session = Depends(get_db),
) -> schemas.PlayerStatsRead:
    try:
        row = crud.get_player_stats(db, player_id, scope_type, scope_key)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return serializers.stats_to_read(row)


@router.get("/leaderboard", response_model=list[schemas.LeaderboardRow])
def get_leaderboard(
    scope_type: schemas.ScopeType = Query(default="tournament"),
    scope_key: str = Query(min_length=1),
    db: Session = Depends(get_db),
) -> list[schemas.LeaderboardRow]:
    return serializers.leaderboard_rows(crud.list_scope_stats(db, scope_type, scope_key))
