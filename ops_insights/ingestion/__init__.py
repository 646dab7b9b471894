"""
Ingestion layer: loads record snapshots from JSON into validated models.

Modules
-------
record_loader : load_records_json() → RecordBundle (clients, licenses, financials).
"""
