"""
Pipeline layer: concurrent source fan-out and the InsightEngine orchestrator.

Modules
-------
fanout : gather_sources() → per-source SourceResult capture.
engine : InsightEngine — business insights, recommendations, analytics.
"""
