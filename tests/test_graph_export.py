"""Tests for JSON and DOT export."""

import json
from pathlib import Path

import pytest

from kairo.analyzer import analyze
from kairo.graph_export import export_dot, export_json, result_to_dict


@pytest.fixture
def sample_result(sample_project_path: Path):
    return analyze(sample_project_path)


def test_result_to_dict_is_json_ready(sample_result):
    payload = result_to_dict(sample_result)

    encoded = json.loads(json.dumps(payload))
    assert encoded["stats"] == {
        "totalComponents": 9,
        "componentsByType": sample_result.stats.components_by_type,
        "totalDependencies": 12,
    }
    components = {c["id"]: c for c in encoded["graph"]["components"]}
    assert components["LightningWebComponent:invoiceList"]["filePath"].endswith("invoiceList.js")
    trigger_edge = next(d for d in encoded["graph"]["dependencies"] if d["type"] == "triggers_on")
    assert trigger_edge == {
        "from": "ApexTrigger:InvoiceTrigger",
        "to": "CustomObject:Invoice__c",
        "type": "triggers_on",
        "weight": 3,
    }


def test_export_json_with_focus(sample_result, temp_dir: Path):
    output = temp_dir / "focus.json"
    export_json(sample_result, output, focus="invoicePanel")

    payload = json.loads(output.read_text(encoding="utf-8"))
    ids = {c["id"] for c in payload["graph"]["components"]}
    assert ids == {"AuraComponent:invoicePanel", "ApexClass:InvoiceService"}
    assert len(payload["graph"]["dependencies"]) == 1
    assert payload["stats"]["totalComponents"] == 9


def test_export_dot(sample_result, temp_dir: Path):
    output = temp_dir / "graph.dot"
    export_dot(sample_result, output)

    text = output.read_text(encoding="utf-8")
    assert text.startswith("digraph Kairo {")
    assert '"AuraComponent:invoicePanel" -> "ApexClass:InvoiceService"' in text
    assert "Business Logic" in text
    assert text.rstrip().endswith("}")


def test_unmatched_focus_exports_everything(sample_result, temp_dir: Path):
    output = temp_dir / "graph.dot"
    export_dot(sample_result, output, focus="no-such-component")

    assert output.read_text(encoding="utf-8").count(" -> ") == 12


def test_placeholders_have_no_file_path(sample_result):
    components = {c["id"]: c for c in result_to_dict(sample_result)["graph"]["components"]}

    assert "filePath" not in components["CustomObject:Opportunity"]
    assert components["CustomObject:Invoice__c"]["filePath"].endswith("Invoice__c.object-meta.xml")


def test_focus_includes_callers_and_callees(sample_result, temp_dir: Path):
    output = temp_dir / "focus.json"
    export_json(sample_result, output, focus="InvoiceAuditor")

    payload = json.loads(output.read_text(encoding="utf-8"))
    ids = {c["id"] for c in payload["graph"]["components"]}
    assert ids == {
        "ApexClass:InvoiceAuditor",
        "ApexClass:InvoiceService",
        "ApexTrigger:InvoiceTrigger",
        "CustomObject:Invoice__c",
    }
    assert all("ApexClass:InvoiceAuditor" in (d["from"], d["to"]) for d in payload["graph"]["dependencies"])
