"""
Analyzers: pure functions turning record snapshots into ranked findings.

Modules
-------
cost   : license waste scan, material-waste selector, cost-inefficiency,
         underutilized and expiring-license finders.
growth : growth-opportunity ranking + upsell-candidate selector.
churn  : composite churn-risk ranking, health-threshold at-risk selector,
         portfolio health overview.
"""
