import logging
import sqlite3
from types import TracebackType

from job_harvester.models import JobRecord

logger = logging.getLogger(__name__)

RECORD_COLUMNS = list(JobRecord.model_fields)


class Database:
    """
    SQLite store for extracted job records, usable as a session collector.
    Records are de-duplicated by job URL; records without a URL are always stored.
    Supports context manager protocol for proper resource cleanup.
    """

    def __init__(self, db_path: str = "jobs.db") -> None:
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = sqlite3.connect(db_path)
        self.init_db()

    @property
    def connection(self) -> sqlite3.Connection:
        """Return the persistent database connection."""
        if self._conn is None:
            raise RuntimeError("Database connection is closed")
        return self._conn

    def init_db(self) -> None:
        """Create the job_records table if it doesn't exist."""
        cursor = self.connection.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS job_records (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                job_title TEXT NOT NULL,
                company_name TEXT NOT NULL DEFAULT '',
                location TEXT NOT NULL DEFAULT '',
                employment_type TEXT NOT NULL DEFAULT '',
                salary_range TEXT NOT NULL DEFAULT '',
                job_description TEXT NOT NULL DEFAULT '',
                required_skills TEXT NOT NULL DEFAULT '',
                experience_requirements TEXT NOT NULL DEFAULT '',
                education_requirements TEXT NOT NULL DEFAULT '',
                benefits TEXT NOT NULL DEFAULT '',
                application_deadline TEXT NOT NULL DEFAULT '',
                posted_date TEXT NOT NULL DEFAULT '',
                job_url TEXT UNIQUE,
                source_website TEXT NOT NULL DEFAULT '',
                last_updated TEXT NOT NULL DEFAULT '',
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        self.connection.commit()
        logger.info(f"Database initialized at {self.db_path}")

    def save_record(self, record: JobRecord) -> bool:
        """
        Attempt to save a record to the database.
        Returns True if saved, False if a record with the same job URL already exists.
        """
        values = record.model_dump()
        # NULL URLs never collide with each other under the UNIQUE constraint
        values["job_url"] = values["job_url"] or None
        placeholders = ", ".join("?" for _ in RECORD_COLUMNS)
        try:
            cursor = self.connection.cursor()
            cursor.execute(
                f"INSERT INTO job_records ({', '.join(RECORD_COLUMNS)}) VALUES ({placeholders})",
                tuple(values[column] for column in RECORD_COLUMNS),
            )
            self.connection.commit()
            return True
        except sqlite3.IntegrityError:
            logger.debug(f"Duplicate record skipped: {record.job_url}")
            return False
        except Exception as e:
            logger.error(f"Error saving record {record.job_url or record.job_title}: {e}")
            raise

    def submit_records(self, records: list[JobRecord]) -> None:
        """Collector entry point: store a batch of records in order."""
        saved = sum(1 for record in records if self.save_record(record))
        logger.info(f"Stored {saved} new records ({len(records) - saved} duplicates)")

    def count_records(self) -> int:
        cursor = self.connection.cursor()
        cursor.execute("SELECT COUNT(*) FROM job_records")
        return int(cursor.fetchone()[0])

    def fetch_records(self) -> list[JobRecord]:
        """All stored records in insertion order."""
        cursor = self.connection.cursor()
        cursor.execute(f"SELECT {', '.join(RECORD_COLUMNS)} FROM job_records ORDER BY id")
        return [
            JobRecord(**{column: value or "" for column, value in zip(RECORD_COLUMNS, row)})
            for row in cursor.fetchall()
        ]

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "Database":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
