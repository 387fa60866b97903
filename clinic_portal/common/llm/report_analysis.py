# clinic_portal/common/llm/report_analysis.py
"""
Report analysis through the Gemini ``generateContent`` endpoint.

The service sends the report file inline together with an instruction prompt
and parses the JSON object out of the model's text answer. When the call
fails and mock fallback is enabled, a canned analysis chosen from the file
name is returned instead.
"""

import base64
import json
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from clinic_portal.models.models import TimelineEntryType
from clinic_portal.models.records import AnalysisResult

logger = logging.getLogger(__name__)


ANALYSIS_PROMPT = """You are a medical AI assistant analyzing a medical report. Please analyze this medical report and provide:

1. A brief summary of the report
2. List all health parameters found with their values, units, and normal ranges
3. Identify any risk factors or abnormal values
4. Provide health recommendations based on the findings

Format your response as a JSON object with this exact structure:
{
  "summary": "Brief summary of the report",
  "reportType": "Type of report (e.g., Complete Blood Count, Lipid Profile, General Checkup)",
  "parameters": [
    {
      "name": "Parameter name",
      "value": "Measured value",
      "unit": "Unit of measurement",
      "normalRange": "Normal range",
      "status": "normal|low|high|critical",
      "category": "Category (Blood/Liver/Kidney/Lipid Profile/etc)"
    }
  ],
  "riskFactors": [
    {
      "severity": "low|medium|high|critical",
      "title": "Risk factor title",
      "description": "Detailed description",
      "recommendation": "What to do about it"
    }
  ],
  "recommendations": ["Recommendation 1", "Recommendation 2"]
}

Important:
- Mark status as "low" if below normal range, "high" if above normal range, "critical" if dangerously out of range
- Provide specific, actionable recommendations
- Use Indian medical standards and units (e.g., mg/dL for glucose)"""

TRACKABLE_CATEGORIES = ("Blood", "Blood Sugar", "Lipid Profile", "Kidney", "Liver")

DEFAULT_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.0-flash:generateContent"

JSON_BLOCK = re.compile(r"```json\s*([\s\S]*?)\s*```")
JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class AnalysisError(Exception):
    """The report could not be analyzed."""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parameter(name, value, unit, normal_range, status, category) -> Dict[str, str]:
    return {
        "name": name,
        "value": value,
        "unit": unit,
        "normalRange": normal_range,
        "status": status,
        "category": category,
    }


def _risk(severity, title, description, recommendation) -> Dict[str, str]:
    return {
        "severity": severity,
        "title": title,
        "description": description,
        "recommendation": recommendation,
    }


MOCK_BLOOD = {
    "summary": (
        "Complete Blood Count (CBC) report shows mostly normal parameters with slight elevation "
        "in white blood cell count, which may indicate a mild infection or inflammation."
    ),
    "reportType": "Complete Blood Count (CBC)",
    "parameters": [
        _parameter("Hemoglobin", "14.2", "g/dL", "13.0-17.0", "normal", "Blood"),
        _parameter("White Blood Cells", "11.5", "×10³/μL", "4.0-10.0", "high", "Blood"),
        _parameter("Platelets", "250", "×10³/μL", "150-400", "normal", "Blood"),
        _parameter("Red Blood Cells", "4.8", "×10⁶/μL", "4.5-5.5", "normal", "Blood"),
    ],
    "riskFactors": [
        _risk(
            "low", "Elevated White Blood Cell Count",
            "Your white blood cell count is slightly above the normal range at 11.5 ×10³/μL. "
            "This could indicate a mild infection, inflammation, or stress response.",
            "Monitor for symptoms like fever or fatigue. Consult your doctor if symptoms persist.",
        ),
    ],
    "recommendations": [
        "Stay well-hydrated and get adequate rest",
        "Monitor for any signs of infection (fever, pain, fatigue)",
        "Follow up with your doctor if WBC count remains elevated",
    ],
}

MOCK_LIPID = {
    "summary": (
        "Lipid profile shows elevated LDL cholesterol and total cholesterol levels, indicating "
        "increased cardiovascular risk. HDL cholesterol is within normal range."
    ),
    "reportType": "Lipid Profile",
    "parameters": [
        _parameter("Total Cholesterol", "220", "mg/dL", "<200", "high", "Lipid Profile"),
        _parameter("LDL Cholesterol", "145", "mg/dL", "<100", "high", "Lipid Profile"),
        _parameter("HDL Cholesterol", "48", "mg/dL", ">40", "normal", "Lipid Profile"),
        _parameter("Triglycerides", "165", "mg/dL", "<150", "high", "Lipid Profile"),
    ],
    "riskFactors": [
        _risk(
            "medium", "High LDL Cholesterol",
            "Your LDL (bad) cholesterol is elevated at 145 mg/dL, which increases the risk of heart disease.",
            "Adopt a heart-healthy diet low in saturated fats and increase physical activity.",
        ),
        _risk(
            "medium", "Elevated Triglycerides",
            "Triglyceride levels are slightly above normal, which can contribute to atherosclerosis.",
            "Reduce sugar and refined carbohydrate intake and limit alcohol.",
        ),
    ],
    "recommendations": [
        "Follow a Mediterranean or DASH diet",
        "Exercise for at least 30 minutes, 5 days a week",
        "Consult a cardiologist for a personalized treatment plan",
    ],
}

MOCK_GENERAL = {
    "summary": (
        "General health checkup shows overall good health with some areas requiring attention. "
        "Blood sugar is slightly elevated, and vitamin D levels are low."
    ),
    "reportType": "General Health Checkup",
    "parameters": [
        _parameter("Fasting Blood Sugar", "108", "mg/dL", "70-100", "high", "Blood Sugar"),
        _parameter("Vitamin D", "18", "ng/mL", "30-100", "low", "Vitamins"),
        _parameter("Hemoglobin", "14.5", "g/dL", "13.0-17.0", "normal", "Blood"),
        _parameter("Creatinine", "0.9", "mg/dL", "0.6-1.2", "normal", "Kidney"),
        _parameter("SGPT (ALT)", "32", "U/L", "7-56", "normal", "Liver"),
    ],
    "riskFactors": [
        _risk(
            "medium", "Pre-Diabetic Blood Sugar Level",
            "Fasting blood sugar at 108 mg/dL indicates pre-diabetes.",
            "Regular exercise, weight management and a low-glycemic diet. Monitor blood sugar regularly.",
        ),
        _risk(
            "low", "Vitamin D Deficiency",
            "Low vitamin D levels can affect bone health, immune function, and mood.",
            "Increase sun exposure or take supplements as prescribed.",
        ),
    ],
    "recommendations": [
        "Get 30-45 minutes of daily exercise",
        "Reduce refined sugar and carbohydrate intake",
        "Retest blood sugar in 3 months",
    ],
}


def mock_analysis(file_name: str) -> Dict[str, Any]:
    """Canned analysis picked from keywords in the file name."""
    name = (file_name or "").lower()
    if "blood" in name or "cbc" in name:
        template = MOCK_BLOOD
    elif "lipid" in name or "cholesterol" in name:
        template = MOCK_LIPID
    else:
        template = MOCK_GENERAL
    return {**json.loads(json.dumps(template)), "analyzedAt": _now()}


def parse_analysis_text(text: str) -> Dict[str, Any]:
    """Pull the JSON object out of a model answer (fenced ```json block or bare object)."""
    match = JSON_BLOCK.search(text)
    raw = match.group(1) if match else None
    if raw is None:
        match = JSON_OBJECT.search(text)
        raw = match.group(0) if match else None
    if raw is None:
        raise AnalysisError("Invalid response format from analysis service")
    try:
        analysis = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise AnalysisError(f"Malformed analysis JSON: {exc}") from exc
    if not isinstance(analysis, dict) or "summary" not in analysis:
        raise AnalysisError("Analysis is missing a summary")
    try:
        return AnalysisResult.model_validate(analysis).to_record()
    except ValidationError as exc:
        raise AnalysisError(f"Analysis has an unexpected shape: {exc.error_count()} invalid fields") from exc


def extract_health_timeline_data(
    analysis: Dict[str, Any],
    report_id: str,
    report_date: str,
) -> List[Dict[str, Any]]:
    """Lab-result timeline entries for parameters in trackable categories."""
    entries = []
    for param in analysis.get("parameters") or []:
        if param.get("category") not in TRACKABLE_CATEGORIES:
            continue
        slug = re.sub(r"\s", "-", param.get("name", "").lower())
        entries.append({
            "id": f"timeline-{report_id}-{slug}",
            "date": report_date,
            "type": TimelineEntryType.LAB_RESULT.value,
            "title": param.get("name", ""),
            "value": f"{param.get('value', '')} {param.get('unit', '')}".strip(),
            "normalRange": param.get("normalRange"),
            "status": param.get("status"),
            "category": param.get("category"),
            "reportId": report_id,
        })
    return entries


class ReportAnalysisService:
    """Client for the external report analysis model."""

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        api_key: str = "",
        timeout: float = 60.0,
        mock_fallback: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.timeout = timeout
        self.mock_fallback = mock_fallback
        self.transport = transport

    async def _request(self, content: bytes, mime_type: str) -> Dict[str, Any]:
        if not self.api_key:
            raise AnalysisError("Analysis API key not configured")

        payload = {
            "contents": [{
                "parts": [
                    {"text": ANALYSIS_PROMPT},
                    {"inline_data": {
                        "mime_type": mime_type,
                        "data": base64.b64encode(content).decode("ascii"),
                    }},
                ],
            }],
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.api_url,
                    json=payload,
                    headers={"X-goog-api-key": self.api_key},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as exc:
            raise AnalysisError(f"Analysis timed out after {self.timeout}s") from exc
        except httpx.HTTPError as exc:
            raise AnalysisError(f"Analysis request failed: {exc}") from exc

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise AnalysisError("Unexpected analysis response shape") from exc
        return parse_analysis_text(text)

    async def analyze(
        self,
        file_name: str,
        content: Optional[bytes] = None,
        mime_type: str = "application/pdf",
    ) -> Dict[str, Any]:
        """
        Analyze one report file.

        Returns an analysis dict (summary, reportType, parameters, riskFactors,
        recommendations, analyzedAt). Raises AnalysisError when the call fails
        and mock fallback is disabled.
        """
        try:
            if content is None:
                raise AnalysisError("No report content supplied")
            analysis = await self._request(content, mime_type)
        except AnalysisError as exc:
            if not self.mock_fallback:
                logger.error("Analysis of %s failed: %s", file_name, exc)
                raise
            logger.warning("Analysis of %s failed (%s); using mock analysis", file_name, exc)
            return mock_analysis(file_name)

        logger.info("Analyzed %s as %s", file_name, analysis.get("reportType"))
        return {**analysis, "analyzedAt": _now()}
