from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..database import get_db

router = APIRouter(tags=["tournaments"])


@router.post("/", response_model=schemas.TournamentRead, status_code=status.HTTP_201_CREATED)
def create_tournament(
    payload: schemas.TournamentCreate,
    db: Session = Depends(get_db),
) -> schemas.TournamentRead:
    try:
        return crud.create_tournament(db, payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("/{tournament_id}", response_model=schemas.TournamentRead)
def get_tournament(tournament_id: int, db: Session = Depends(get_db)) -> schemas.TournamentRead:
    try:
        return crud.get_tournament_or_raise(db, tournament_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
