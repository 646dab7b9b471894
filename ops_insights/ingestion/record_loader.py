"""
Record snapshot loader: JSON → validated record models.

Snapshot format
---------------
One JSON object with three optional top-level lists, snake_case keys matching
the record model fields::

    {
      "clients":    [{"client_id": "c-1", "name": "Acme", "health_score": 55, ...}],
      "licenses":   [{"license_id": "l-1", "name": "CRM Suite", "cost": 1000, ...}],
      "financials": [{"period": "2024-03-01", "department": "Sales", ...}]
    }

Validation rules
----------------
- Each entry is validated by its pydantic model (score ranges, status values,
  non-empty department); the first invalid entry raises ``ValidationError``.
- Duplicate ``client_id`` or ``license_id`` values are rejected.
- Unknown top-level keys are rejected so a typo ("licences") fails loudly
  instead of silently producing an empty section.

Usage
-----
    from ops_insights.ingestion.record_loader import load_records_json

    bundle = load_records_json(Path("data/records.json"))
    store = InMemoryRecordStore.from_bundle(bundle)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ops_insights.models.records import (
    ClientRecord,
    FinancialDataRecord,
    SoftwareLicenseRecord,
)

log = logging.getLogger(__name__)

_SECTIONS: frozenset[str] = frozenset({"clients", "licenses", "financials"})


class RecordBundle(BaseModel):
    """All three record lists from one snapshot, in file order."""

    model_config = ConfigDict(frozen=True)

    clients: list[ClientRecord] = Field(default_factory=list)
    licenses: list[SoftwareLicenseRecord] = Field(default_factory=list)
    financials: list[FinancialDataRecord] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.clients) + len(self.licenses) + len(self.financials)


def parse_records(raw: dict[str, Any]) -> RecordBundle:
    """Validate an already-decoded snapshot dict.

    Raises:
        ValueError: On unknown or non-list sections, or duplicate ids.
        pydantic.ValidationError: On an invalid record.
    """
    unknown = set(raw) - _SECTIONS
    if unknown:
        raise ValueError(
            f"Unknown record sections: {sorted(unknown)}. "
            f"Expected any of {sorted(_SECTIONS)}."
        )
    for name in sorted(_SECTIONS & set(raw)):
        if not isinstance(raw[name], list):
            raise ValueError(f"'{name}' must be a list, got {type(raw[name]).__name__}.")

    clients = [ClientRecord.model_validate(c) for c in raw.get("clients", [])]
    licenses = [SoftwareLicenseRecord.model_validate(lic) for lic in raw.get("licenses", [])]
    financials = [FinancialDataRecord.model_validate(f) for f in raw.get("financials", [])]

    _reject_duplicates("client_id", [c.client_id for c in clients])
    _reject_duplicates("license_id", [lic.license_id for lic in licenses])

    return RecordBundle(clients=clients, licenses=licenses, financials=financials)


def load_records_json(path: Path) -> RecordBundle:
    """Read and validate a JSON record snapshot.

    Args:
        path: Snapshot file.

    Returns:
        ``RecordBundle`` with records in file order.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file is not a JSON object, or on duplicate ids.
        pydantic.ValidationError: On an invalid record.
    """
    if not path.exists():
        raise FileNotFoundError(f"Records file not found: {path}")

    with open(path, encoding="utf-8") as fh:
        raw = json.load(fh)
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a JSON object at the top level.")

    bundle = parse_records(raw)
    log.info(
        "Loaded %d records from %s (%d clients, %d licenses, %d financials)",
        bundle.total, path,
        len(bundle.clients), len(bundle.licenses), len(bundle.financials),
    )
    return bundle


def _reject_duplicates(field: str, ids: list[str]) -> None:
    seen: set[str] = set()
    for i, value in enumerate(ids):
        if value in seen:
            raise ValueError(f"Duplicate {field} '{value}' at index {i}.")
        seen.add(value)
