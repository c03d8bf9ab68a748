"""
External identifier module.

Short random identifiers that address a result from outside without
exposing its internal id.
"""
