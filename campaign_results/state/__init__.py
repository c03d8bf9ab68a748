"""
Result status state machine module.

Owns the per-target funnel status and applies guarded transitions:
QUEUED → SENT → OPENED → CLICKED → SUBMITTED_DATA, with SENDING_ERROR and
RETRY orthogonal to funnel progress.
"""
