"""
Configuration module.

Dataclass defaults, YAML overrides and validation for the result tracker.
"""
