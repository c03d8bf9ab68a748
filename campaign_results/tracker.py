"""
Result tracker composition root.

Wires configuration, stores, the event recorder, the state machine, the
identifier generator and geo enrichment together. Long-lived resources
(the SQLite stores and the geo database) are created once here and shared
by every operation.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

import structlog

from .config.defaults import TrackerConfig
from .config.loader import ConfigLoader
from .config.validation import ConfigValidator
from .errors import LookupUnavailable, ValidationError
from .events.recorder import EventRecorder
from .geo.database import GeoDatabase
from .geo.enricher import GeoEnricher
from .identity.generator import IdentifierGenerator
from .logging.config import configure_logging
from .persistence.campaign_store import CampaignStore
from .persistence.result_store import ResultStore
from .state.machine import ResultStateMachine
from .state.models import Result, ResultStatus, TrackingDetails
from .utils.time import Clock, ensure_utc, utc_now

logger = structlog.get_logger(__name__)


class ResultTracker:
    """
    Entry point for higher layers.

    The mail pipeline calls mark_sent/mark_send_error/mark_backoff, tracking
    endpoints call mark_opened/mark_clicked/mark_submitted/mark_reported and
    update_geo, and campaign setup calls create_result.
    """

    def __init__(
        self,
        config: Optional[TrackerConfig] = None,
        config_dir: Optional[Union[str, Path]] = None,
        overrides: Optional[dict[str, Any]] = None,
        geo_database: Optional[GeoDatabase] = None,
        clock: Clock = utc_now
    ) -> None:
        """Initialize the tracker and open its long-lived resources."""
        self.logger = logger

        if config is None:
            config = self._load_config(config_dir, overrides)
        self.config = config
        configure_logging(level=config.logging.level, format_json=config.logging.format_json)

        self.campaigns = CampaignStore(
            config.store.database_path, timeout=config.store.timeout_seconds
        )
        self.results = ResultStore(
            config.store.database_path, timeout=config.store.timeout_seconds
        )

        self.recorder = EventRecorder(self.campaigns, clock=clock)
        self.state_machine = ResultStateMachine(
            self.recorder,
            self.results,
            max_save_attempts=config.store.max_save_attempts,
        )
        self.identifiers = IdentifierGenerator(
            self.results,
            max_attempts=config.identifier.max_attempts,
        )

        self._owns_geo_database = geo_database is None
        if geo_database is None and config.geo.enabled:
            geo_database = self._open_geo_database(config.geo.database_path)
        self.geo_database = geo_database
        self.geo = GeoEnricher(
            geo_database, self.results, max_save_attempts=config.store.max_save_attempts
        )

        self.logger.info(
            "Result tracker initialized",
            database_path=config.store.database_path,
            geo_enabled=geo_database is not None
        )

    def _load_config(
        self,
        config_dir: Optional[Union[str, Path]],
        overrides: Optional[dict[str, Any]]
    ) -> TrackerConfig:
        """Load, validate and build configuration."""
        loader = ConfigLoader.create(Path(config_dir) if config_dir else None)
        raw = loader.load_config(overrides)

        issues = ConfigValidator.validate_config(raw)
        if issues:
            messages = [f"{i.field}: {i.message} (got: {i.value!r})" for i in issues]
            self.logger.error("Configuration validation failed", errors=messages)
            raise ValidationError(
                "Invalid tracker configuration",
                field="config",
                value=messages,
            )

        return loader.build_config(overrides)

    def _open_geo_database(self, path: str) -> Optional[GeoDatabase]:
        """Open the geo database, or run without enrichment if it is unavailable."""
        try:
            return GeoDatabase.open(path)
        except LookupUnavailable as e:
            self.logger.warning(
                "Geo enrichment disabled, database unavailable",
                path=path,
                error=str(e)
            )
            return None

    def create_result(
        self,
        campaign_id: int,
        user_id: int,
        email: str,
        first_name: str = "",
        last_name: str = "",
        position: str = "",
        send_date: Optional[datetime] = None
    ) -> Result:
        """
        Insert a queued result under a fresh external identifier.

        Raises:
            NotFound: the campaign does not exist for ``user_id``
            GenerationExhausted: no free identifier within the retry cap
        """
        self.campaigns.get_campaign(campaign_id, user_id)

        def create(rid: str) -> Result:
            return self.results.insert(Result(
                id=0,
                campaign_id=campaign_id,
                user_id=user_id,
                rid=rid,
                email=email,
                first_name=first_name,
                last_name=last_name,
                position=position,
                status=ResultStatus.QUEUED,
                send_date=ensure_utc(send_date) if send_date else None,
            ))

        result = self.identifiers.assign(create)

        self.logger.info(
            "Result created",
            result_id=result.rid,
            campaign_id=campaign_id
        )
        return result

    def get_result(self, rid: str) -> Result:
        """Result addressed by its external identifier."""
        return self.results.find_by_rid(rid)

    def mark_sent(self, result: Result) -> Result:
        return self.state_machine.mark_sent(result)

    def mark_send_error(self, result: Result, error: Exception) -> Result:
        return self.state_machine.mark_send_error(result, error)

    def mark_backoff(self, result: Result, error: Exception, send_date: datetime) -> Result:
        return self.state_machine.mark_backoff(result, error, send_date)

    def mark_opened(self, result: Result, details: TrackingDetails) -> Result:
        return self.state_machine.mark_opened(result, details)

    def mark_clicked(self, result: Result, details: TrackingDetails) -> Result:
        return self.state_machine.mark_clicked(result, details)

    def mark_submitted(self, result: Result, details: TrackingDetails) -> Result:
        return self.state_machine.mark_submitted(result, details)

    def mark_reported(self, result: Result, details: TrackingDetails) -> Result:
        return self.state_machine.mark_reported(result, details)

    def update_geo(self, result: Result, addr: str) -> Result:
        return self.geo.update_geo(result, addr)

    def close(self) -> None:
        """Release the geo database if this tracker opened it."""
        if self.geo_database is not None and self._owns_geo_database:
            self.geo_database.close()

    def __enter__(self) -> "ResultTracker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
