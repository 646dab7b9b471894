"""Recommendation type, priority and impact enums."""
