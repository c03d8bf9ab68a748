"""
Utility functions module.

Address formatting and UTC clock helpers shared across the tracker.
"""
