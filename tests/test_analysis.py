import json

import httpx
import pytest

from clinic_portal.common.llm.report_analysis import (
    AnalysisError, ReportAnalysisService, extract_health_timeline_data,
    mock_analysis, parse_analysis_text,
)

ANALYSIS = {
    "summary": "Mixed results.",
    "reportType": "General Health Checkup",
    "parameters": [
        {"name": "Fasting Blood Sugar", "value": "108", "unit": "mg/dL", "normalRange": "70-100",
         "status": "high", "category": "Blood Sugar"},
        {"name": "Vitamin D", "value": "18", "unit": "ng/mL", "normalRange": "30-100",
         "status": "low", "category": "Vitamins"},
        {"name": "Creatinine", "value": "0.9", "unit": "mg/dL", "normalRange": "0.6-1.2",
         "status": "normal", "category": "Kidney"},
    ],
}


def test_parse_fenced_json_block():
    text = "Sure.\n```json\n" + json.dumps({"summary": "ok"}) + "\n```\nThanks"
    analysis = parse_analysis_text(text)
    assert analysis["summary"] == "ok"
    assert analysis["parameters"] == []
    assert analysis["riskFactors"] == []
    assert analysis["recommendations"] == []


def test_parse_bare_json_object():
    analysis = parse_analysis_text('Result: {"summary": "bare", "reportType": "CBC"}')
    assert analysis["reportType"] == "CBC"


@pytest.mark.parametrize("text", [
    "no json here",
    "```json\n{not valid}\n```",
    '{"reportType": "CBC"}',
])
def test_parse_rejects_unusable_answers(text):
    with pytest.raises(AnalysisError):
        parse_analysis_text(text)


def test_timeline_keeps_trackable_categories_only():
    entries = extract_health_timeline_data(ANALYSIS, "r1", "2025-03-01")

    assert [e["title"] for e in entries] == ["Fasting Blood Sugar", "Creatinine"]
    first = entries[0]
    assert first["id"] == "timeline-r1-fasting-blood-sugar"
    assert first["type"] == "lab_result"
    assert first["value"] == "108 mg/dL"
    assert first["date"] == "2025-03-01"
    assert first["reportId"] == "r1"


@pytest.mark.parametrize("file_name, report_type", [
    ("CBC-march.pdf", "Complete Blood Count (CBC)"),
    ("blood_test.jpg", "Complete Blood Count (CBC)"),
    ("Cholesterol.pdf", "Lipid Profile"),
    ("checkup.pdf", "General Health Checkup"),
    ("", "General Health Checkup"),
])
def test_mock_analysis_picks_template_by_name(file_name, report_type):
    analysis = mock_analysis(file_name)
    assert analysis["reportType"] == report_type
    assert analysis["analyzedAt"]


def test_mock_analysis_returns_independent_copies():
    first = mock_analysis("lipid.pdf")
    first["parameters"].clear()
    assert mock_analysis("lipid.pdf")["parameters"]


async def test_missing_api_key_uses_mock_when_allowed():
    service = ReportAnalysisService(api_key="", mock_fallback=True)
    analysis = await service.analyze("lipid.pdf", b"data")
    assert analysis["reportType"] == "Lipid Profile"


async def test_missing_api_key_raises_without_fallback():
    service = ReportAnalysisService(api_key="", mock_fallback=False)
    with pytest.raises(AnalysisError):
        await service.analyze("lipid.pdf", b"data")


async def test_unexpected_response_shape_raises():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"candidates": []}))
    service = ReportAnalysisService(api_key="key", mock_fallback=False, transport=transport)
    with pytest.raises(AnalysisError):
        await service.analyze("report.pdf", b"data")


async def test_http_error_raises():
    transport = httpx.MockTransport(lambda request: httpx.Response(503, text="busy"))
    service = ReportAnalysisService(api_key="key", mock_fallback=False, transport=transport)
    with pytest.raises(AnalysisError):
        await service.analyze("report.pdf", b"data")


def test_parse_normalizes_numeric_values():
    text = json.dumps({
        "summary": "CBC",
        "parameters": [{"name": "Hemoglobin", "value": 14.2, "unit": "g/dL", "status": "normal"}],
    })
    analysis = parse_analysis_text(text)
    assert analysis["parameters"][0]["value"] == "14.2"
    assert analysis["reportType"] == ""


def test_parse_rejects_unknown_statuses():
    text = json.dumps({
        "summary": "CBC",
        "parameters": [{"name": "Hemoglobin", "value": "14.2", "status": "borderline"}],
    })
    with pytest.raises(AnalysisError):
        parse_analysis_text(text)
