"""
Campaign Results - Target lifecycle tracking for outreach campaigns

Tracks the status of each target in a campaign as delivery, open, click,
submission and report events arrive, assigns opaque external identifiers
to target records, and enriches records with approximate geolocation.
"""

__version__ = "0.1.0"
__author__ = "Campaign Results Team"
