from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..database import get_db

router = APIRouter(tags=["rounds"])


@router.post("/", response_model=schemas.RoundRead, status_code=status.HTTP_201_CREATED)
def create_round(payload: schemas.RoundCreate, db: Session = Depends(get_db)) -> schemas.RoundRead:
    try:
        return crud.create_round(db, payload)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.get("/{round_id}", response_model=schemas.RoundRead)
def get_round(round_id: int, db: Session = Depends(get_db)) -> schemas.RoundRead:
    try:
        return crud.get_round_or_raise(db, round_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.get("/{round_id}/skins", response_model=schemas.SkinsRead)
def get_round_skins(round_id: int, db: Session = Depends(get_db)) -> schemas.SkinsRead:
    try:
        return crud.compute_round_skins(db, round_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
