"""
Geo enrichment of result records.

Resolves a client address and writes ip/latitude/longitude onto the
record. The new values are only applied to a copy, and only that copy is
saved, so any failure before or during the save leaves both the stored
record and the caller's instance as they were.
"""

import ipaddress
from typing import Optional

from ..errors import InvalidAddress, LookupUnavailable, StaleRecordError
from ..logging.config import get_logger
from ..state.machine import ResultRepository
from ..state.models import Result
from .database import GeoDatabase

logger = get_logger(__name__)


class GeoEnricher:
    """Updates results with coordinates from a shared GeoDatabase."""

    def __init__(
        self,
        database: Optional[GeoDatabase],
        store: ResultRepository,
        max_save_attempts: int = 5
    ):
        self.database = database
        self.store = store
        self.max_save_attempts = max_save_attempts
        self.logger = logger

    def update_geo(self, result: Result, addr: str) -> Result:
        """
        Resolve ``addr`` and persist it with its coordinates.

        Returns:
            The saved record

        Raises:
            InvalidAddress: ``addr`` is not an IP address
            LookupUnavailable: no usable geo database
            GeoRecordNotFound: address has no location; callers usually
                carry on without coordinates
            PersistenceError: the save failed
        """
        if not isinstance(addr, str):
            raise InvalidAddress(f"Invalid IP address: {addr!r}", address=addr)

        try:
            ip = ipaddress.ip_address(addr)
        except ValueError as e:
            raise InvalidAddress(f"Invalid IP address: {addr!r}", address=addr) from e

        if self.database is None:
            raise LookupUnavailable("Geo lookup is disabled")

        point = self.database.lookup(ip)

        current = result
        for attempt in range(1, self.max_save_attempts + 1):
            try:
                saved = self.store.save(current.with_geo(addr, point.latitude, point.longitude))
            except StaleRecordError:
                self.logger.info(
                    "Stale record on geo update, reloading",
                    result_id=result.rid,
                    attempt=attempt
                )
                current = self.store.get(current.id)
                continue

            self.logger.info(
                "Result geo updated",
                result_id=saved.rid,
                ip=addr,
                latitude=point.latitude,
                longitude=point.longitude
            )
            return saved

        raise StaleRecordError(
            f"Result {result.rid} kept changing during geo update after "
            f"{self.max_save_attempts} attempts",
            result_id=result.id,
            expected_version=current.version,
        )
