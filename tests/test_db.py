import sqlite3

import pytest

from job_harvester.db import Database
from job_harvester.models import JobRecord


@pytest.fixture
def db():
    """Fixture to provide an in-memory database for testing."""
    with Database(db_path=":memory:") as test_db:
        yield test_db


def test_init_db(db):
    """Test that the table is created correctly."""
    cursor = db.connection.cursor()
    cursor.execute("SELECT name FROM sqlite_master WHERE type='table' AND name='job_records'")
    assert cursor.fetchone() is not None


def test_save_record_success(db, sample_record):
    """Test saving a valid record."""
    assert db.save_record(sample_record) is True

    cursor = db.connection.cursor()
    cursor.execute(
        "SELECT job_title, job_url FROM job_records WHERE job_url = ?", (sample_record.job_url,)
    )
    row = cursor.fetchone()
    assert row == ("Senior Python Developer", "https://jobs.example.com/jobs/123")


def test_save_record_duplicate_url(db, sample_record):
    """Test that saving a record with an existing job URL returns False."""
    duplicate = JobRecord(job_title="Different Title", job_url=sample_record.job_url)

    assert db.save_record(sample_record) is True
    assert db.save_record(duplicate) is False
    assert db.count_records() == 1


def test_records_without_url_are_always_stored(db):
    """Test that records lacking a URL never collide."""
    assert db.save_record(JobRecord(job_title="Data Analyst")) is True
    assert db.save_record(JobRecord(job_title="Data Analyst")) is True
    assert db.count_records() == 2


def test_submit_records_and_fetch(db, sample_record):
    """Test the collector entry point and reading records back in order."""
    other = JobRecord(job_title="QA Engineer", location="Lyon, France")

    db.submit_records([sample_record, other, sample_record])

    records = db.fetch_records()
    assert records == [sample_record, other]


def test_context_manager_closes_connection():
    """Test that the context manager properly closes the connection on exit."""
    with Database(db_path=":memory:") as db:
        assert db.connection is not None

    with pytest.raises(RuntimeError, match="closed"):
        _ = db.connection


def test_close_is_idempotent():
    """Test that closing twice does not raise."""
    db = Database(db_path=":memory:")
    db.close()
    db.close()


def test_persists_to_file(tmp_path, sample_record):
    """Test that records survive reopening a file database."""
    path = str(tmp_path / "jobs.db")
    with Database(db_path=path) as db:
        db.save_record(sample_record)

    conn = sqlite3.connect(path)
    try:
        count = conn.execute("SELECT COUNT(*) FROM job_records").fetchone()[0]
    finally:
        conn.close()
    assert count == 1
