"""
SQLite persistence for results, campaigns and campaign event logs.
"""
from .campaign_store import CampaignStore, StoredCampaign
from .result_store import ResultStore

__all__ = ["CampaignStore", "StoredCampaign", "ResultStore"]
