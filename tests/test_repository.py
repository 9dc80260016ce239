"""
Estimate store tests — direct calls against the SQLite test session.

Tests:
1-4.  Save / load round trip, quote number assignment, update in place
5-6.  Revisions
7-9.  Delete, list, notes
10-11. Failure handling
"""

from datetime import date, datetime

from sqlalchemy.exc import SQLAlchemyError

from steel_estimator import models, repository

JAN_2025 = date(2025, 1, 15)


def _raise_db_error(*args, **kwargs):
    raise SQLAlchemyError("database is locked")


# ============================================================
# 1-4. Save / load
# ============================================================

def test_save_and_load_round_trip(db, sample_estimate):
    result = repository.save_estimate(db, sample_estimate, today=JAN_2025)
    assert result.success
    assert result.id
    assert result.quote_number == "2501-01"

    loaded = repository.get_estimate(db, result.id)
    assert loaded.success and loaded.found
    estimate = loaded.estimate
    assert estimate.id == result.id
    assert estimate.total_cost == 17000
    assert estimate.project_info.project_name == "Warehouse Addition"
    assert estimate.project_info.quote_number == "2501-01"
    assert estimate.created_at is not None
    assert [m.id for m in estimate.structural_steel.material] == \
        [m.id for m in sample_estimate.structural_steel.material]


def test_missing_estimate_is_not_found(db):
    loaded = repository.get_estimate(db, "no-such-id")
    assert loaded.success
    assert loaded.found is False
    assert loaded.estimate is None


def test_new_estimates_fill_quote_number_gaps(db, sample_estimate):
    first = repository.save_estimate(db, sample_estimate, today=JAN_2025)
    second = repository.save_estimate(db, sample_estimate, today=JAN_2025)
    third = repository.save_estimate(db, sample_estimate, today=JAN_2025)
    assert [first.quote_number, second.quote_number, third.quote_number] == ["2501-01", "2501-02", "2501-03"]

    repository.delete_estimate(db, second.id)
    refill = repository.save_estimate(db, sample_estimate, today=JAN_2025)
    assert refill.quote_number == "2501-02"


def test_update_in_place_keeps_id_and_number(db, sample_estimate):
    created = repository.save_estimate(db, sample_estimate, today=JAN_2025)
    estimate = repository.get_estimate(db, created.id).estimate
    estimate.metal_deck.area = 2000

    updated = repository.save_estimate(db, estimate, today=JAN_2025)
    assert updated.id == created.id
    assert updated.quote_number == "2501-01"

    reloaded = repository.get_estimate(db, created.id).estimate
    # Saved snapshots are normalized: the deck total follows the new area
    assert reloaded.metal_deck.total_cost == 10000
    assert reloaded.total_cost == 22000
    assert db.query(models.EstimateRecord).count() == 1


def test_unknown_id_is_inserted(db, sample_estimate):
    estimate = sample_estimate.model_copy(update={"id": "client-generated-id"})
    result = repository.save_estimate(db, estimate, today=JAN_2025)
    assert result.success
    assert result.id == "client-generated-id"
    assert result.quote_number == "2501-01"
    assert repository.get_estimate(db, "client-generated-id").found


# ============================================================
# 5-6. Revisions
# ============================================================

def test_save_revision_creates_new_record(db, sample_estimate):
    original = repository.save_estimate(db, sample_estimate, today=JAN_2025)

    rev1 = repository.save_revision(db, original.id)
    assert rev1.success
    assert rev1.id != original.id
    assert rev1.quote_number == "2501-01R1"

    rev2 = repository.save_revision(db, original.id)
    assert rev2.quote_number == "2501-01R2"

    rev3 = repository.save_revision(db, rev2.id)
    assert rev3.quote_number == "2501-01R3"

    assert repository.get_estimate(db, original.id).estimate.project_info.quote_number == "2501-01"
    assert repository.get_estimate(db, rev1.id).estimate.total_cost == 17000


def test_revision_of_missing_estimate_fails(db):
    result = repository.save_revision(db, "no-such-id")
    assert result.success is False
    assert "not found" in result.error


# ============================================================
# 7-9. Delete, list, notes
# ============================================================

def test_delete_estimate(db, sample_estimate):
    created = repository.save_estimate(db, sample_estimate, today=JAN_2025)
    assert repository.delete_estimate(db, created.id).success
    assert repository.get_estimate(db, created.id).found is False
    # Deleting again is not an error
    assert repository.delete_estimate(db, created.id).success


def test_list_estimates_newest_first(db, sample_estimate):
    first = repository.save_estimate(db, sample_estimate, today=JAN_2025)
    second = repository.save_estimate(db, sample_estimate, today=JAN_2025)

    db.query(models.EstimateRecord).filter(models.EstimateRecord.id == first.id).update(
        {"created_at": datetime(2025, 1, 1)}
    )
    db.commit()

    result = repository.list_estimates(db)
    assert result.success
    assert [e.id for e in result.estimates] == [second.id, first.id]


def test_update_notes(db, sample_estimate):
    created = repository.save_estimate(db, sample_estimate, today=JAN_2025)
    assert repository.update_notes(db, created.id, "Called GC, awaiting addendum").success
    assert repository.get_estimate(db, created.id).estimate.notes == "Called GC, awaiting addendum"

    missing = repository.update_notes(db, "no-such-id", "x")
    assert missing.success is False


# ============================================================
# 10-11. Failure handling
# ============================================================

def test_database_failure_is_reported_not_raised(db, sample_estimate, monkeypatch):
    monkeypatch.setattr(db, "commit", _raise_db_error)
    result = repository.save_estimate(db, sample_estimate, today=JAN_2025)
    assert result.success is False
    assert "database is locked" in result.error


def test_quote_number_lookup_failure_falls_back_to_01(db, sample_estimate, monkeypatch):
    repository.save_estimate(db, sample_estimate, today=JAN_2025)
    monkeypatch.setattr(db, "query", _raise_db_error)
    assert repository.assign_quote_number(db, today=JAN_2025) == "2501-01"
