from __future__ import annotations

import copy
import json
from datetime import datetime, timedelta

import pytest
from sqlalchemy import text

from complaints.db.session import get_session
from complaints.domain import Complaint, ComplaintStatus, IssueCategory
from complaints.repositories.json_storage import JsonSnapshotRepository
from complaints.repositories.sql_repository import SQLComplaintRepository
from complaints.services.complaint_store import ComplaintStore
from complaints.services.persistence_gateway import PersistenceGateway


class Clock:
    def __init__(self, start=datetime(2025, 11, 20, 8, 0, 0, 123456)):
        self.current = start

    def __call__(self):
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture()
def backends(make_backend):
    return make_backend("database", []), make_backend("backup", None)


@pytest.fixture()
def store(backends):
    primary, backup = backends
    store = ComplaintStore(PersistenceGateway(primary, backup), clock=Clock())
    store.start()
    return store


def test_empty_storage_starts_at_id_one(backends):
    primary, backup = backends
    store = ComplaintStore(PersistenceGateway(primary, backup))
    assert store.start() == "empty"
    assert store.list_all() == ()
    assert store.next_tracking_id == 1


def test_log_first_complaint(store, backends):
    primary, _ = backends
    tracking_id = store.log_complaint(5, "Streetlight out on Oak Ave", IssueCategory.STREET_LIGHTING)

    assert tracking_id == 1
    complaint = store.get(1)
    assert complaint.status is ComplaintStatus.SUBMITTED
    assert complaint.zone_number == 5
    assert complaint.submission_date == datetime(2025, 11, 20, 8, 0, 0)
    assert primary.data == [complaint]


def test_ids_are_unique_and_increasing(store):
    ids = [store.log_complaint(i, f"issue {i}", IssueCategory.OTHER_MUNICIPAL) for i in range(10)]
    assert ids == sorted(set(ids))
    assert ids == list(range(1, 11))


def test_counter_resumes_after_highest_loaded_id(make_backend):
    stored = [
        Complaint(3, 1, "a", IssueCategory.WATER_OUTAGE),
        Complaint(8, 1, "b", IssueCategory.WATER_OUTAGE),
    ]
    store = ComplaintStore(PersistenceGateway(make_backend("database", stored), make_backend("backup")))
    assert store.start() == "database"
    assert store.log_complaint(2, "c", IssueCategory.EXCESSIVE_NOISE) == 9


def test_update_unknown_id_changes_nothing(store, backends):
    primary, _ = backends
    store.log_complaint(1, "a", IssueCategory.TRASH_COLLECTION)
    before = copy.deepcopy(store.list_all())
    saves = len(primary.saves)

    assert store.update_status(42, ComplaintStatus.CLOSED) is False
    assert store.list_all() == before
    assert len(primary.saves) == saves


def test_update_changes_only_status(store, backends):
    primary, _ = backends
    store.log_complaint(1, "a", IssueCategory.TRASH_COLLECTION)
    before = copy.deepcopy(store.get(1))

    assert store.update_status(1, ComplaintStatus.IN_REVIEW) is True
    after = store.get(1)
    assert after.status is ComplaintStatus.IN_REVIEW
    assert (after.tracking_id, after.zone_number, after.details, after.category, after.submission_date) == (
        before.tracking_id,
        before.zone_number,
        before.details,
        before.category,
        before.submission_date,
    )
    assert primary.data[0].status is ComplaintStatus.IN_REVIEW


def test_update_accepts_any_status(store):
    store.log_complaint(1, "a", IssueCategory.TRASH_COLLECTION)
    store.update_status(1, ComplaintStatus.CLOSED)
    assert store.update_status(1, ComplaintStatus.SUBMITTED) is True
    assert store.get(1).status is ComplaintStatus.SUBMITTED


def test_trend_report_counts_open_complaints(store):
    first = store.log_complaint(1, "bins", IssueCategory.TRASH_COLLECTION)
    store.log_complaint(2, "bins again", IssueCategory.TRASH_COLLECTION)
    assert store.trend_report()["TRASH_COLLECTION"] == 2

    store.update_status(first, ComplaintStatus.CLOSED)
    assert store.trend_report()[IssueCategory.TRASH_COLLECTION] == 1


def test_trend_report_skips_closed_and_empty_categories(store):
    noise = store.log_complaint(1, "music", IssueCategory.EXCESSIVE_NOISE)
    review = store.log_complaint(1, "pipe", IssueCategory.WATER_OUTAGE)
    store.update_status(noise, ComplaintStatus.CLOSED)
    store.update_status(review, ComplaintStatus.IN_REVIEW)

    report = store.trend_report()
    assert report == {IssueCategory.WATER_OUTAGE: 1}
    assert IssueCategory.EXCESSIVE_NOISE not in report
    assert IssueCategory.STREET_LIGHTING not in report


def test_list_all_is_insertion_ordered_and_read_only(store):
    store.log_complaint(1, "a", IssueCategory.TRASH_COLLECTION)
    store.log_complaint(1, "b", IssueCategory.STREET_LIGHTING)
    listing = store.list_all()
    assert [c.details for c in listing] == ["a", "b"]
    assert isinstance(listing, tuple)


def test_failed_flush_keeps_memory_state(make_backend):
    store = ComplaintStore(
        PersistenceGateway(make_backend("database", [], fail_save=True), make_backend("backup"))
    )
    store.start()
    assert store.log_complaint(1, "a", IssueCategory.TRASH_COLLECTION) == 1
    assert len(store.list_all()) == 1


def test_backup_and_restore(store, backends):
    primary, backup = backends
    store.log_complaint(1, "a", IssueCategory.TRASH_COLLECTION)
    assert store.save_backup() is True
    store.log_complaint(1, "b", IssueCategory.TRASH_COLLECTION)

    assert store.restore_backup() is True
    assert [c.details for c in store.list_all()] == ["a"]
    # id 2 was already handed out in this session
    assert store.next_tracking_id == 3
    assert primary.data == backup.data


def test_restore_without_backup_leaves_collection(store):
    store.log_complaint(1, "a", IssueCategory.TRASH_COLLECTION)
    assert store.restore_backup() is False
    assert len(store.list_all()) == 1


def test_shutdown_writes_both_mirrors(store, backends, journal):
    primary, backup = backends
    store.log_complaint(1, "a", IssueCategory.TRASH_COLLECTION)
    journal.clear()

    report = store.shutdown()
    assert report.ok
    assert journal == [("database", "save"), ("backup", "save")]
    assert primary.data == backup.data == list(store.list_all())


def test_session_survives_restart(temp_db, tmp_path):
    def open_store():
        gateway = PersistenceGateway(SQLComplaintRepository(), JsonSnapshotRepository(tmp_path / "backup.json"))
        store = ComplaintStore(gateway)
        return store, store.start()

    store, source = open_store()
    assert source == "empty"
    store.log_complaint(5, "Streetlight out on Oak Ave", IssueCategory.STREET_LIGHTING)
    store.log_complaint(2, "Missed pickup", IssueCategory.TRASH_COLLECTION)
    store.update_status(2, ComplaintStatus.CLOSED)
    before = store.list_all()

    reopened, source = open_store()
    assert source == "database"
    assert reopened.list_all() == before
    assert reopened.next_tracking_id == 3


def test_restore_rejects_snapshot_with_duplicate_ids(store, tmp_path):
    path = tmp_path / "backup.json"
    entry = {
        "tracking_id": 1, "zone_number": 1, "details": "x",
        "category": "WATER_OUTAGE", "status": "SUBMITTED",
        "submission_date": "2025-03-01 09:15:00",
    }
    path.write_text(json.dumps({"complaints": [entry, entry]}), encoding="utf-8")
    store.gateway.backup = JsonSnapshotRepository(path)
    store.log_complaint(1, "a", IssueCategory.TRASH_COLLECTION)

    assert store.restore_backup() is False
    assert [c.tracking_id for c in store.list_all()] == [1]


def test_corrupt_row_keeps_database_untouched(temp_db, tmp_path):
    repo = SQLComplaintRepository()
    repo.save([Complaint(i, 1, f"issue {i}", IssueCategory.WATER_OUTAGE) for i in (1, 2, 3)])
    with get_session() as session:
        session.execute(
            text(
                "INSERT INTO COMPLAINTS VALUES "
                "(4, 1, 'broken', '2025-03-01 09:15:00', 'POTHOLES', 'SUBMITTED')"
            )
        )
        session.commit()

    store = ComplaintStore(PersistenceGateway(repo, JsonSnapshotRepository(tmp_path / "backup.json")))
    assert store.start() == "empty"
    store.log_complaint(1, "new", IssueCategory.TRASH_COLLECTION)
    report = store.shutdown()

    assert report.database_saved is False
    assert report.backup_saved is True
    with get_session() as session:
        ids = [row[0] for row in session.execute(text("SELECT TRACKING_ID FROM COMPLAINTS ORDER BY 1"))]
    assert ids == [1, 2, 3, 4]
