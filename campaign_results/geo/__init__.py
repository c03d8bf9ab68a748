"""
Geolocation enrichment module.

Resolves client addresses to approximate coordinates with a MaxMind DB
opened once per process.
"""
from .database import GeoDatabase, GeoPoint
from .enricher import GeoEnricher

__all__ = ["GeoDatabase", "GeoPoint", "GeoEnricher"]
