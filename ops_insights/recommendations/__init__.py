"""
Recommendations layer: generators (findings → Recommendation) and the ranker
(global priority ordering + dedup).
"""
