from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..database import get_db

router = APIRouter(tags=["admin"])


@router.post("/recompute", response_model=schemas.AdminRecomputeReport)
def recompute_everything(
    dry_run: bool = Query(default=True),
    confirm: bool = Query(default=False),
    db: Session = Depends(get_db),
) -> schemas.AdminRecomputeReport:
    try:
        return crud.recompute_all(db, dry_run=dry_run, confirm=confirm)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
