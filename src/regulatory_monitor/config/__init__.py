"""Configuration and static taxonomy tables."""
