"""
Estimate store — save, load, list, delete, revise.

Every function takes the request's Session and returns a result object
instead of raising: a database failure is logged, rolled back and
reported as success=False with the message. Nothing retries.

Snapshots are normalized (full recompute) both on the way in and on
the way out, so a record written under older rules reads back
consistent.
"""

import logging
import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from .calculators.aggregation import recalculate_all
from .quote_numbers import first_quote_number, next_quote_number, next_revision_number, quote_prefix
from .schemas import Estimate, ListResult, LoadResult, SaveResult, StoreResult

logger = logging.getLogger(__name__)


def _to_estimate(record: models.EstimateRecord) -> Estimate:
    estimate = Estimate.model_validate(record.payload or {})
    estimate.id = record.id
    estimate.notes = record.notes
    estimate.created_at = record.created_at
    estimate.updated_at = record.updated_at
    return recalculate_all(estimate)


def _payload(estimate: Estimate) -> dict:
    # Record-level columns are not duplicated into the JSON
    return estimate.model_dump(
        mode="json", by_alias=True,
        exclude={"id", "notes", "created_at", "updated_at"},
    )


def _copy_columns(record: models.EstimateRecord, estimate: Estimate):
    record.quote_number = estimate.project_info.quote_number
    record.project_name = estimate.project_info.project_name
    record.total_cost = estimate.total_cost
    record.payload = _payload(estimate)


def assign_quote_number(db: Session, today: Optional[date] = None) -> str:
    """Next free YYMM-NN for this month; YYMM-01 when the lookup fails."""
    prefix = quote_prefix(today)
    try:
        rows = db.query(models.EstimateRecord.quote_number).filter(
            models.EstimateRecord.quote_number.like(f"{prefix}%")
        ).all()
    except SQLAlchemyError as e:
        logger.warning("Quote number lookup failed, falling back to %s01: %s", prefix, e)
        db.rollback()
        return first_quote_number(today)
    return next_quote_number((row[0] for row in rows), today)


def get_estimate(db: Session, estimate_id: str) -> LoadResult:
    try:
        record = db.get(models.EstimateRecord, estimate_id)
    except SQLAlchemyError as e:
        logger.error("Error getting estimate %s: %s", estimate_id, e)
        db.rollback()
        return LoadResult(success=False, error=str(e))

    if record is None:
        return LoadResult(success=True, found=False)
    return LoadResult(success=True, found=True, estimate=_to_estimate(record))


def save_estimate(db: Session, estimate: Estimate, today: Optional[date] = None) -> SaveResult:
    """
    Create (no id) or update (id given) an estimate.

    New estimates get a fresh id and the next quote number for the
    month. An id that is not in the table is inserted under that id.
    """
    estimate = recalculate_all(estimate.model_copy(deep=True))
    try:
        record = db.get(models.EstimateRecord, estimate.id) if estimate.id else None
        if record is None:
            # The number on an unsaved estimate is provisional; an upserted id keeps its own
            if not estimate.id or not estimate.project_info.quote_number:
                estimate.project_info.quote_number = assign_quote_number(db, today)
            estimate.id = estimate.id or str(uuid.uuid4())
            record = models.EstimateRecord(id=estimate.id, created_at=datetime.utcnow())
            db.add(record)
            logger.info("Creating estimate %s (%s)", estimate.id, estimate.project_info.quote_number)
        else:
            logger.info("Updating estimate %s", estimate.id)

        _copy_columns(record, estimate)
        if estimate.notes is not None:
            record.notes = estimate.notes
        record.updated_at = datetime.utcnow()
        db.commit()
    except SQLAlchemyError as e:
        logger.error("Error saving estimate: %s", e)
        db.rollback()
        return SaveResult(success=False, error=str(e))

    return SaveResult(success=True, id=estimate.id, quote_number=estimate.project_info.quote_number)


def save_revision(db: Session, estimate_id: str) -> SaveResult:
    """
    Store a copy of a saved estimate as a new record under the next
    revision number (2501-03 -> 2501-03R1). The original is untouched.
    """
    loaded = get_estimate(db, estimate_id)
    if not loaded.success:
        return SaveResult(success=False, error=loaded.error)
    if not loaded.found:
        return SaveResult(success=False, error=f"Estimate {estimate_id} not found")

    revision = loaded.estimate.model_copy(deep=True)
    revision.id = str(uuid.uuid4())
    revision.created_at = None
    revision.updated_at = None
    try:
        number = next_revision_number(revision.project_info.quote_number)
        # Skip numbers already taken by an earlier revision of the same quote
        while db.query(models.EstimateRecord).filter(models.EstimateRecord.quote_number == number).first():
            number = next_revision_number(number)
        revision.project_info.quote_number = number

        record = models.EstimateRecord(id=revision.id, created_at=datetime.utcnow())
        _copy_columns(record, revision)
        record.notes = revision.notes
        record.updated_at = record.created_at
        db.add(record)
        db.commit()
    except SQLAlchemyError as e:
        logger.error("Error saving revision of %s: %s", estimate_id, e)
        db.rollback()
        return SaveResult(success=False, error=str(e))

    logger.info("Saved revision %s of estimate %s", number, estimate_id)
    return SaveResult(success=True, id=revision.id, quote_number=number)


def delete_estimate(db: Session, estimate_id: str) -> StoreResult:
    """Deleting an id that is not stored still succeeds."""
    try:
        db.query(models.EstimateRecord).filter(models.EstimateRecord.id == estimate_id).delete()
        db.commit()
    except SQLAlchemyError as e:
        logger.error("Error deleting estimate %s: %s", estimate_id, e)
        db.rollback()
        return StoreResult(success=False, error=str(e))
    return StoreResult(success=True)


def list_estimates(db: Session, skip: int = 0, limit: int = 100) -> ListResult:
    try:
        records = db.query(models.EstimateRecord).order_by(
            models.EstimateRecord.created_at.desc()
        ).offset(skip).limit(limit).all()
    except SQLAlchemyError as e:
        logger.error("Error listing estimates: %s", e)
        db.rollback()
        return ListResult(success=False, error=str(e))
    return ListResult(success=True, estimates=[_to_estimate(r) for r in records])


def update_notes(db: Session, estimate_id: str, notes: str) -> StoreResult:
    try:
        record = db.get(models.EstimateRecord, estimate_id)
        if record is None:
            return StoreResult(success=False, error=f"Estimate {estimate_id} not found")
        record.notes = notes
        record.updated_at = datetime.utcnow()
        db.commit()
    except SQLAlchemyError as e:
        logger.error("Error updating notes on %s: %s", estimate_id, e)
        db.rollback()
        return StoreResult(success=False, error=str(e))
    return StoreResult(success=True)
