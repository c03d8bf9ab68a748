"""
Result status state machine.

Each operation appends one event to the owning campaign's log, evaluates
the guard for that event kind against the record's current status, and
persists the new status. A guard only ever suppresses the status write;
the event is always recorded so the log keeps the full history even when
tracking requests arrive late or twice.
"""

from datetime import datetime
from typing import Callable, Optional, Protocol

from ..errors import NotFound, StaleRecordError, SystemFailureError
from ..events.recorder import EventRecorder
from ..logging.config import get_state_logger, log_event_divergence, log_state_transition
from ..utils.time import ensure_utc
from .models import (
    ErrorDetails,
    Event,
    EventDetails,
    EventKind,
    Result,
    TrackingDetails,
)
from .transitions import get_rule, is_regression

state_logger = get_state_logger(__name__)

# Builds the record to write from the freshest copy and the recorded event;
# returns None when the guard suppresses the write.
Mutation = Callable[[Result, Event], Optional[Result]]


class ResultRepository(Protocol):
    """Record persistence consumed by the state machine."""

    def save(self, result: Result) -> Result:
        """Compare-and-set write; raises StaleRecordError on version mismatch."""
        ...

    def get(self, result_id: int) -> Result:
        ...


class ResultStateMachine:
    """Applies guarded status transitions to target records."""

    def __init__(
        self,
        recorder: EventRecorder,
        store: ResultRepository,
        max_save_attempts: int = 5
    ):
        self.recorder = recorder
        self.store = store
        self.max_save_attempts = max_save_attempts
        self.logger = state_logger

    def mark_sent(self, result: Result) -> Result:
        """Message handed off to the mail server."""
        return self._transition(result, EventKind.SENT, None, self._status_mutation(EventKind.SENT))

    def mark_send_error(self, result: Result, error: Exception) -> Result:
        """Delivery failed permanently."""
        return self._transition(
            result,
            EventKind.SENDING_ERROR,
            ErrorDetails(error=str(error)),
            self._status_mutation(EventKind.SENDING_ERROR),
        )

    def mark_backoff(self, result: Result, error: Exception, send_date: datetime) -> Result:
        """Delivery failed temporarily; reschedule for ``send_date``."""
        send_date = ensure_utc(send_date)

        def mutation(current: Result, event: Event) -> Optional[Result]:
            return current.with_retry(send_date, event.time)

        return self._transition(
            result, EventKind.SENDING_ERROR, ErrorDetails(error=str(error)), mutation
        )

    def mark_opened(self, result: Result, details: TrackingDetails) -> Result:
        """Open-tracking request received. No-op on status once clicked or submitted."""
        return self._transition(result, EventKind.OPENED, details, self._status_mutation(EventKind.OPENED))

    def mark_clicked(self, result: Result, details: TrackingDetails) -> Result:
        """Tracked link followed. No-op on status once data was submitted."""
        return self._transition(result, EventKind.CLICKED, details, self._status_mutation(EventKind.CLICKED))

    def mark_submitted(self, result: Result, details: TrackingDetails) -> Result:
        """Landing page form submitted."""
        return self._transition(
            result, EventKind.SUBMITTED_DATA, details, self._status_mutation(EventKind.SUBMITTED_DATA)
        )

    def mark_reported(self, result: Result, details: TrackingDetails) -> Result:
        """Recipient reported the message. Status is left untouched."""

        def mutation(current: Result, event: Event) -> Optional[Result]:
            return current.with_reported(event.time)

        return self._transition(result, EventKind.REPORTED, details, mutation)

    def _status_mutation(self, kind: EventKind) -> Mutation:
        """Mutation moving the status per the transition table."""
        rule = get_rule(kind)

        def mutation(current: Result, event: Event) -> Optional[Result]:
            if not rule.allows(current.status):
                return None
            return current.with_status(rule.target, event.time)

        return mutation

    def _transition(
        self,
        result: Result,
        kind: EventKind,
        details: Optional[EventDetails],
        mutation: Mutation
    ) -> Result:
        """
        Record the event once, then write the mutation with stale retries.

        On a version conflict the record is reloaded and the mutation is
        re-evaluated against the fresh status, so a guard never acts on a
        status another writer has already replaced.
        """
        event = self.recorder.record(result, kind, details)

        current = result
        for attempt in range(1, self.max_save_attempts + 1):
            updated = mutation(current, event)

            if updated is None:
                log_state_transition(
                    self.logger,
                    result_id=current.rid,
                    from_state=current.status.value,
                    to_state=current.status.value,
                    trigger=kind.value,
                    applied=False,
                    context={"event_time": event.time.isoformat()}
                )
                return current

            if is_regression(current.status, updated.status):
                self.logger.warning(
                    "Unguarded transition moves status back down the funnel",
                    result_id=current.rid,
                    from_state=current.status.value,
                    to_state=updated.status.value,
                    trigger=kind.value
                )

            try:
                saved = self.store.save(updated)
            except StaleRecordError:
                self.logger.info(
                    "Stale record on save, reloading",
                    result_id=current.rid,
                    attempt=attempt,
                    expected_version=current.version
                )
                try:
                    current = self.store.get(current.id)
                except (NotFound, SystemFailureError) as e:
                    log_event_divergence(self.logger, result.rid, kind.value, event.time, e)
                    raise
                continue
            except (NotFound, SystemFailureError) as e:
                log_event_divergence(self.logger, result.rid, kind.value, event.time, e)
                raise

            log_state_transition(
                self.logger,
                result_id=saved.rid,
                from_state=current.status.value,
                to_state=saved.status.value,
                trigger=kind.value,
                applied=True,
                context={
                    "event_time": event.time.isoformat(),
                    "reported": saved.reported,
                    "version": saved.version,
                }
            )
            return saved

        error = StaleRecordError(
            f"Result {result.rid} kept changing during {kind.value} after "
            f"{self.max_save_attempts} attempts",
            result_id=result.id,
            expected_version=current.version,
        )
        log_event_divergence(self.logger, result.rid, kind.value, event.time, error)
        raise error
