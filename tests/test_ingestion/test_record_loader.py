"""
Tests for ops_insights/ingestion/record_loader.py.

What we test
------------
1. A valid snapshot loads every section in file order.
2. Missing sections default to empty lists.
3. Record defaults apply (health 75, SLA 95, satisfaction 80, status active).
4. Unknown top-level sections are rejected.
5. Duplicate client/license ids are rejected.
6. Out-of-range scores and bad statuses raise ValidationError.
7. Missing file → FileNotFoundError; non-object JSON → ValueError.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

from ops_insights.ingestion.record_loader import load_records_json, parse_records


def _dump(tmp_path: Path, payload) -> Path:
    path = tmp_path / "records.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestLoadRecordsJson:
    def test_full_snapshot(self, tmp_path):
        path = _dump(tmp_path, {
            "clients": [
                {"client_id": "c-2", "name": "Beta"},
                {"client_id": "c-1", "name": "Alpha", "monthly_revenue": 4000},
            ],
            "licenses": [
                {"license_id": "l-1", "name": "CRM", "cost": 900,
                 "utilization": 35, "renewal_date": "2024-07-01"},
            ],
            "financials": [
                {"period": "2024-02-10", "department": " Sales ",
                 "revenue": 1000, "operational_costs": 400},
            ],
        })
        bundle = load_records_json(path)
        assert [c.client_id for c in bundle.clients] == ["c-2", "c-1"]
        assert bundle.licenses[0].renewal_date == date(2024, 7, 1)
        assert bundle.financials[0].period == date(2024, 2, 1)
        assert bundle.financials[0].department == "Sales"
        assert bundle.total == 4

    def test_client_defaults(self, tmp_path):
        bundle = load_records_json(_dump(tmp_path, {"clients": [{"client_id": "c", "name": "C"}]}))
        client = bundle.clients[0]
        assert (client.health_score, client.sla_compliance, client.satisfaction_score) == (75, 95, 80)
        assert client.status == "active"
        assert client.monthly_revenue is None

    def test_missing_sections(self, tmp_path):
        bundle = load_records_json(_dump(tmp_path, {}))
        assert bundle.total == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_records_json(tmp_path / "absent.json")

    def test_non_object(self, tmp_path):
        with pytest.raises(ValueError, match="JSON object"):
            load_records_json(_dump(tmp_path, [1, 2]))


class TestParseRecordsValidation:
    def test_unknown_section(self):
        with pytest.raises(ValueError, match="licences"):
            parse_records({"licences": []})

    @pytest.mark.parametrize("section", ["clients", "licenses", "financials"])
    def test_null_section_rejected(self, section):
        with pytest.raises(ValueError, match=f"'{section}' must be a list"):
            parse_records({section: None})

    def test_object_section_rejected(self):
        with pytest.raises(ValueError, match="got dict"):
            parse_records({"clients": {"client_id": "c", "name": "A"}})

    def test_duplicate_client_id(self):
        with pytest.raises(ValueError, match="Duplicate client_id"):
            parse_records({"clients": [
                {"client_id": "c", "name": "A"},
                {"client_id": "c", "name": "B"},
            ]})

    def test_duplicate_license_id(self):
        with pytest.raises(ValueError, match="Duplicate license_id"):
            parse_records({"licenses": [
                {"license_id": "l", "name": "A", "cost": 1},
                {"license_id": "l", "name": "B", "cost": 2},
            ]})

    @pytest.mark.parametrize("field, value", [
        ("health_score", 101),
        ("sla_compliance", -1),
        ("status", "churned"),
    ])
    def test_invalid_client(self, field, value):
        with pytest.raises(ValidationError):
            parse_records({"clients": [{"client_id": "c", "name": "A", field: value}]})

    def test_empty_department(self):
        with pytest.raises(ValidationError):
            parse_records({"financials": [
                {"period": "2024-01-01", "department": "  ", "revenue": 1, "operational_costs": 1},
            ]})

    def test_negative_cost_passes_through(self):
        bundle = parse_records({"licenses": [{"license_id": "l", "name": "A", "cost": -5}]})
        assert bundle.licenses[0].cost == -5
