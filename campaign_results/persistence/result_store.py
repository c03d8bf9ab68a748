"""Target record persistence with a unique external identifier."""

import sqlite3
from dataclasses import replace

from ..errors import DuplicateIdentifierError, NotFound, StaleRecordError
from ..state.models import Result, ResultStatus
from ..utils.time import format_timestamp, parse_timestamp
from .base import SQLiteStore


class ResultStore(SQLiteStore):
    """
    SQLite-backed result records.

    ``save`` is a compare-and-set on the record version: a writer holding
    an outdated copy gets StaleRecordError instead of overwriting a newer
    status. ``insert`` relies on the UNIQUE constraint on ``r_id`` to
    reject identifiers taken by a concurrent creator.
    """

    def insert(self, result: Result) -> Result:
        """
        Insert a new record and return it with its assigned id.

        Raises:
            DuplicateIdentifierError: ``result.rid`` is already taken
        """
        with self._lock:
            with self._get_connection("insert_result") as conn:
                try:
                    cursor = conn.execute("""
                        INSERT INTO results (
                            campaign_id, user_id, r_id, email, first_name,
                            last_name, position, status, ip, latitude,
                            longitude, send_date, reported, modified_date, version
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 0)
                    """, (
                        result.campaign_id,
                        result.user_id,
                        result.rid,
                        result.email,
                        result.first_name,
                        result.last_name,
                        result.position,
                        result.status.value,
                        result.ip,
                        result.latitude,
                        result.longitude,
                        format_timestamp(result.send_date),
                        int(result.reported),
                        format_timestamp(result.modified_date),
                    ))
                except sqlite3.IntegrityError as e:
                    if "r_id" not in str(e):
                        raise
                    raise DuplicateIdentifierError(
                        f"Result identifier {result.rid!r} already exists",
                        rid=result.rid,
                    ) from e
                conn.commit()
                result_id = cursor.lastrowid

        return replace(result, id=result_id, version=0)

    def save(self, result: Result) -> Result:
        """
        Write the mutable fields of ``result`` and bump its version.

        Identity fields are never rewritten.

        Raises:
            StaleRecordError: the stored version no longer matches
            NotFound: the record does not exist
        """
        with self._lock:
            with self._get_connection("save_result") as conn:
                cursor = conn.execute("""
                    UPDATE results SET
                        status = ?,
                        reported = ?,
                        ip = ?,
                        latitude = ?,
                        longitude = ?,
                        send_date = ?,
                        modified_date = ?,
                        version = version + 1
                    WHERE id = ? AND version = ?
                """, (
                    result.status.value,
                    int(result.reported),
                    result.ip,
                    result.latitude,
                    result.longitude,
                    format_timestamp(result.send_date),
                    format_timestamp(result.modified_date),
                    result.id,
                    result.version,
                ))

                if cursor.rowcount == 0:
                    exists = conn.execute(
                        "SELECT 1 FROM results WHERE id = ?", (result.id,)
                    ).fetchone()
                    if exists is None:
                        raise NotFound(
                            f"Result {result.id} not found",
                            entity="result",
                            key=result.id,
                        )
                    raise StaleRecordError(
                        f"Result {result.rid} changed since version {result.version}",
                        result_id=result.id,
                        expected_version=result.version,
                    )

                conn.commit()

        return result.with_version(result.version + 1)

    def get(self, result_id: int) -> Result:
        """Load a record by internal id."""
        with self._get_connection("get_result") as conn:
            row = conn.execute(
                "SELECT * FROM results WHERE id = ?", (result_id,)
            ).fetchone()

        if row is None:
            raise NotFound(f"Result {result_id} not found", entity="result", key=result_id)

        return self._row_to_result(row)

    def find_by_rid(self, rid: str) -> Result:
        """Load a record by its external identifier."""
        with self._get_connection("find_result") as conn:
            row = conn.execute(
                "SELECT * FROM results WHERE r_id = ?", (rid,)
            ).fetchone()

        if row is None:
            raise NotFound(f"Result {rid!r} not found", entity="result", key=rid)

        return self._row_to_result(row)

    def rid_exists(self, rid: str) -> bool:
        """Whether an external identifier is already taken."""
        with self._get_connection("check_rid") as conn:
            row = conn.execute(
                "SELECT 1 FROM results WHERE r_id = ?", (rid,)
            ).fetchone()

        return row is not None

    def list_by_campaign(self, campaign_id: int) -> list[Result]:
        """All records of a campaign ordered by internal id."""
        with self._get_connection("list_results") as conn:
            rows = conn.execute("""
                SELECT * FROM results WHERE campaign_id = ? ORDER BY id
            """, (campaign_id,)).fetchall()

        return [self._row_to_result(row) for row in rows]

    def _row_to_result(self, row: sqlite3.Row) -> Result:
        """Convert database row to Result object."""
        return Result(
            id=row["id"],
            campaign_id=row["campaign_id"],
            user_id=row["user_id"],
            rid=row["r_id"],
            email=row["email"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            position=row["position"],
            status=ResultStatus(row["status"]),
            reported=bool(row["reported"]),
            ip=row["ip"],
            latitude=row["latitude"],
            longitude=row["longitude"],
            send_date=parse_timestamp(row["send_date"]),
            modified_date=parse_timestamp(row["modified_date"]),
            version=row["version"],
        )
