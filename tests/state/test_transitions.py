"""Tests for the status transition table."""

import pytest

from campaign_results.state.models import EventKind, ResultStatus
from campaign_results.state.transitions import (
    FUNNEL_RANK,
    ORTHOGONAL_STATUSES,
    get_rule,
    is_regression,
)


class TestTransitionRules:
    """Guard table contents."""

    def test_every_event_kind_has_a_rule(self):
        for kind in EventKind:
            assert get_rule(kind).kind == kind

    def test_opened_blocked_by_later_stages(self):
        rule = get_rule(EventKind.OPENED)

        assert rule.target == ResultStatus.OPENED
        assert rule.blocked_by == {ResultStatus.CLICKED, ResultStatus.SUBMITTED_DATA}

    def test_clicked_blocked_by_submitted(self):
        rule = get_rule(EventKind.CLICKED)

        assert rule.target == ResultStatus.CLICKED
        assert rule.blocked_by == {ResultStatus.SUBMITTED_DATA}

    @pytest.mark.parametrize("kind", [
        EventKind.SENT, EventKind.SENDING_ERROR, EventKind.SUBMITTED_DATA, EventKind.REPORTED
    ])
    def test_unguarded_kinds(self, kind):
        rule = get_rule(kind)

        assert all(rule.allows(status) for status in ResultStatus)

    def test_reported_leaves_status(self):
        assert get_rule(EventKind.REPORTED).target is None

    @pytest.mark.parametrize("status", sorted(ORTHOGONAL_STATUSES))
    def test_orthogonal_never_block(self, status):
        for kind in EventKind:
            assert get_rule(kind).allows(status)


class TestFunnelOrder:
    """Funnel ranking helpers."""

    def test_funnel_order(self):
        ordered = sorted(FUNNEL_RANK, key=FUNNEL_RANK.get)

        assert ordered == [
            ResultStatus.QUEUED,
            ResultStatus.SENT,
            ResultStatus.OPENED,
            ResultStatus.CLICKED,
            ResultStatus.SUBMITTED_DATA,
        ]

    def test_regression(self):
        assert is_regression(ResultStatus.CLICKED, ResultStatus.SENT)
        assert not is_regression(ResultStatus.SENT, ResultStatus.CLICKED)
        assert not is_regression(ResultStatus.OPENED, ResultStatus.OPENED)

    def test_orthogonal_is_never_regression(self):
        assert not is_regression(ResultStatus.CLICKED, ResultStatus.SENDING_ERROR)
        assert not is_regression(ResultStatus.RETRY, ResultStatus.SENT)
