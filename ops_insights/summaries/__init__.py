"""
Aggregate summaries over record snapshots.

Modules
-------
aggregate : group_summaries() + bucket_histogram() — generic reducers.
analytics : client, license, and financial analytics views built on them.
"""
