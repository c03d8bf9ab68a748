"""Process-scope handle on a MaxMind city database."""

import threading
from dataclasses import dataclass
from ipaddress import IPv4Address, IPv6Address
from pathlib import Path
from typing import Any, Optional, Protocol, Union

import maxminddb

from ..errors import GeoRecordNotFound, LookupUnavailable
from ..logging.config import get_logger

logger = get_logger(__name__)

IPAddress = Union[IPv4Address, IPv6Address]


class RecordReader(Protocol):
    """The subset of ``maxminddb.Reader`` the tracker uses."""

    def get(self, ip_address: Any) -> Optional[Any]:
        ...

    def close(self) -> None:
        ...


@dataclass(frozen=True)
class GeoPoint:
    """Approximate coordinates of an address."""
    latitude: float
    longitude: float


class GeoDatabase:
    """
    Read-only geolocation dataset shared by all lookups.

    Open it once at startup and pass it to every GeoEnricher; lookups do
    not lock and may run from many threads. ``close`` waits for nothing,
    so the owner closes it only at shutdown.
    """

    def __init__(self, reader: RecordReader, path: Optional[str] = None):
        self._reader = reader
        self._closed = False
        self._close_lock = threading.Lock()
        self.path = path
        self.logger = logger

    @classmethod
    def open(cls, path: Union[str, Path]) -> "GeoDatabase":
        """
        Open the MaxMind DB at ``path``.

        Raises:
            LookupUnavailable: file missing, unreadable or not a MaxMind DB
        """
        path = str(path)
        try:
            reader = maxminddb.open_database(path)
        except (OSError, ValueError, maxminddb.InvalidDatabaseError) as e:
            logger.error("Geo database unavailable", path=path, error=str(e))
            raise LookupUnavailable(
                f"Cannot open geo database {path}: {e}", path=path
            ) from e

        logger.info("Geo database opened", path=path)
        return cls(reader, path=path)

    @property
    def closed(self) -> bool:
        return self._closed

    def lookup(self, ip: IPAddress) -> GeoPoint:
        """
        Coordinates for ``ip``.

        Raises:
            LookupUnavailable: the database has been closed
            GeoRecordNotFound: no record, a record without a location, or an
                address the database cannot hold (IPv6 in an IPv4-only file)
        """
        if self._closed:
            raise LookupUnavailable("Geo database is closed", path=self.path)

        try:
            record = self._reader.get(ip)
        except ValueError as e:
            # maxminddb raises ValueError both after close and for an IPv6
            # lookup in an IPv4-only database.
            if self._closed:
                raise LookupUnavailable("Geo database is closed", path=self.path) from e
            self.logger.warning("Geo lookup rejected", address=str(ip), error=str(e))
            raise GeoRecordNotFound(f"No location for {ip}: {e}", address=str(ip)) from e

        location = record.get("location") if isinstance(record, dict) else None

        if not location or "latitude" not in location or "longitude" not in location:
            raise GeoRecordNotFound(f"No location for {ip}", address=str(ip))

        return GeoPoint(
            latitude=float(location["latitude"]),
            longitude=float(location["longitude"]),
        )

    def close(self) -> None:
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
            self._reader.close()
        self.logger.info("Geo database closed", path=self.path)

    def __enter__(self) -> "GeoDatabase":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
