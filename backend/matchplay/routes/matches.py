from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from .. import crud, schemas, serializers
from ..database import get_db

router = APIRouter(tags=["matches"])


@router.post("/", response_model=schemas.MatchRead, status_code=status.HTTP_201_CREATED)
def create_match(payload: schemas.MatchCreate, db: Session = Depends(get_db)) -> schemas.MatchRead:
    try:
        match = crud.create_match(db, payload)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return serializers.match_to_read(match)


@router.get("/{match_id}", response_model=schemas.MatchRead)
def get_match(match_id: int, db: Session = Depends(get_db)) -> schemas.MatchRead:
    try:
        match = crud.get_match_or_raise(db, match_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return serializers.match_to_read(match)


@router.patch("/{match_id}/holes/{hole_number}", response_model=schemas.MatchRead)
def update_hole(
    match_id: int,
    hole_number: int,
    payload: schemas.HoleUpdate,
    db: Session = Depends(get_db),
) -> schemas.MatchRead:
    try:
        match = crud.update_hole(db, match_id, hole_number, payload)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return serializers.match_to_read(match)


@router.delete("/{match_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_match(match_id: int, db: Session = Depends(get_db)) -> Response:
    try:
        crud.delete_match(db, match_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{match_id}/recompute", response_model=schemas.RecomputeResponse)
def recompute_match(
    match_id: int,
    force: bool = Query(default=False),
    db: Session = Depends(get_db),
) -> schemas.RecomputeResponse:
    try:
        match, recomputed = crud.recompute_match(db, match_id, force=force)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return schemas.RecomputeResponse(recomputed=recomputed, match=serializers.match_to_read(match))


@router.get("/{match_id}/facts", response_model=list[schemas.FactRead])
def list_match_facts(match_id: int, db: Session = Depends(get_db)) -> list[schemas.FactRead]:
    try:
        facts = crud.list_match_facts(db, match_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return [serializers.fact_to_read(fact) for fact in facts]
