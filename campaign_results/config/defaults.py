"""Default configuration parameters for the result tracker."""

import string
from dataclasses import dataclass

RID_LENGTH = 7
RID_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits


@dataclass(frozen=True)
class IdentifierParams:
    """External identifier generation parameters.

    Length and alphabet are fixed by RID_LENGTH and RID_ALPHABET.
    """
    max_attempts: int = 20                           # Collision retry cap


@dataclass(frozen=True)
class GeoParams:
    """Geolocation lookup parameters."""
    enabled: bool = True
    database_path: str = "static/db/geolite2-city.mmdb"


@dataclass(frozen=True)
class StoreParams:
    """SQLite persistence parameters."""
    database_path: str = "results.db"
    max_save_attempts: int = 5                       # Stale-write retries per transition
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class LoggingParams:
    """Logging output parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class TrackerConfig:
    """Complete tracker configuration."""
    identifier: IdentifierParams
    geo: GeoParams
    store: StoreParams
    logging: LoggingParams


def get_default_config() -> TrackerConfig:
    """Get the default configuration instance."""
    return TrackerConfig(
        identifier=IdentifierParams(),
        geo=GeoParams(),
        store=StoreParams(),
        logging=LoggingParams(),
    )
