"""Pydantic models: source records, recommendations, insight summaries, analytics."""
