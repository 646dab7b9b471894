"""Ops Insight Engine: rule-based insights and recommendations over operational records."""

__version__ = "0.1.0"
