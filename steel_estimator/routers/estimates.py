"""
Estimate endpoints.

Calculation endpoints are stateless: the client sends the estimate it
holds plus one command and gets the recomputed estimate back. Storage
endpoints wrap the repository; a failed store operation is a 503 with
the store's message.

All estimate bodies and responses use the camelCase snapshot.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from .. import repository
from ..commands import Command
from ..database import get_db
from ..defaults import new_estimate
from ..estimate_engine import apply_command, normalize
from ..schemas import Estimate, NotesUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/estimates", tags=["estimates"])


class CalculateRequest(BaseModel):
    estimate: Estimate
    command: Command


def _store_failed(error):
    raise HTTPException(status_code=503, detail=error or "Estimate store unavailable")


def _load_or_404(db: Session, estimate_id: str) -> Estimate:
    result = repository.get_estimate(db, estimate_id)
    if not result.success:
        _store_failed(result.error)
    if not result.found:
        raise HTTPException(status_code=404, detail="Estimate not found")
    return result.estimate


# --- Calculation (nothing stored) ---

@router.get("/new")
def get_new_estimate():
    """Fresh default estimate. The quote number is provisional until first save."""
    return new_estimate().to_snapshot()


@router.post("/calculate")
def calculate(request: CalculateRequest):
    try:
        updated = apply_command(request.estimate, request.command)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return updated.to_snapshot()


@router.post("/recalculate")
def recalculate(estimate: Estimate):
    return normalize(estimate).to_snapshot()


# --- Storage ---

@router.post("/")
def create_estimate(estimate: Estimate, db: Session = Depends(get_db)):
    estimate = estimate.model_copy(update={"id": None})
    result = repository.save_estimate(db, estimate)
    if not result.success:
        _store_failed(result.error)
    return result.model_dump()


@router.get("/")
def list_estimates(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    result = repository.list_estimates(db, skip=skip, limit=limit)
    if not result.success:
        _store_failed(result.error)
    return [e.to_snapshot() for e in result.estimates]


@router.get("/{estimate_id}")
def get_estimate(estimate_id: str, db: Session = Depends(get_db)):
    return _load_or_404(db, estimate_id).to_snapshot()


@router.put("/{estimate_id}")
def update_estimate(estimate_id: str, estimate: Estimate, db: Session = Depends(get_db)):
    """Save over the stored record; an unknown id is created under that id."""
    estimate = estimate.model_copy(update={"id": estimate_id})
    result = repository.save_estimate(db, estimate)
    if not result.success:
        _store_failed(result.error)
    return result.model_dump()


@router.delete("/{estimate_id}")
def delete_estimate(estimate_id: str, db: Session = Depends(get_db)):
    result = repository.delete_estimate(db, estimate_id)
    if not result.success:
        _store_failed(result.error)
    return {"message": "Estimate deleted"}


@router.patch("/{estimate_id}/notes")
def update_notes(estimate_id: str, body: NotesUpdate, db: Session = Depends(get_db)):
    _load_or_404(db, estimate_id)
    result = repository.update_notes(db, estimate_id, body.notes)
    if not result.success:
        _store_failed(result.error)
    return result.model_dump()


@router.post("/{estimate_id}/revisions")
def save_revision(estimate_id: str, db: Session = Depends(get_db)):
    _load_or_404(db, estimate_id)
    result = repository.save_revision(db, estimate_id)
    if not result.success:
        _store_failed(result.error)
    logger.info("Revision %s created from %s", result.quote_number, estimate_id)
    return result.model_dump()
