"""
Event recording module.

Appends structured events to the owning campaign's event log.
"""
