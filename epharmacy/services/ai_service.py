import re
from dataclasses import dataclass
from typing import Optional

import google.generativeai as genai
import httpx
from loguru import logger

from epharmacy.core.config import settings
from epharmacy.domain.prescriptions.engine import SymptomReport

SYSTEM_PROMPT = (
    "You are a helpful medical assistant. Provide accurate, evidence-based information "
    "about symptoms and conditions, but always remind users to consult healthcare "
    "professionals for definitive diagnosis and treatment."
)

DIAGNOSIS_PATTERN = re.compile(r"diagnosis:?(.*?)(?=recommendations|$)", re.IGNORECASE | re.DOTALL)
RECOMMENDATIONS_PATTERN = re.compile(r"recommendations:?(.*?)$", re.IGNORECASE | re.DOTALL)

DIAGNOSIS_FALLBACK = "Unable to determine diagnosis"
RECOMMENDATIONS_FALLBACK = "No specific recommendations provided"
NOT_ENABLED = "AI prescription generation is not enabled"


@dataclass
class AIPrescriptionResult:
    diagnosis: str = ""
    recommendations: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def is_enabled() -> bool:
    if not settings.AI_ENABLED:
        return False
    if settings.AI_PROVIDER == "gemini":
        return bool(settings.GEMINI_API_KEY)
    return bool(settings.PERPLEXITY_API_KEY)


def build_prompt(report: SymptomReport) -> str:
    additional = ", ".join(report.additional_symptoms) or "None"
    return f"""
As a medical AI assistant, analyze the following patient symptoms and provide a possible diagnosis and recommendations.
Do NOT prescribe specific medications, just provide general medical advice.

Patient symptoms:
- Main symptom: {report.main_symptom}
- Duration: {report.duration}
- Severity (1-10): {report.severity}
- Additional symptoms: {additional}
- Medical history: {report.details or "None provided"}

Please provide:
1. A brief diagnosis based on these symptoms
2. General recommendations for the patient (lifestyle changes, home remedies, when to see a doctor)
"""


def parse_completion(content: str) -> AIPrescriptionResult:
    """Slice the free-text completion into its diagnosis and recommendations sections"""
    diagnosis_match = DIAGNOSIS_PATTERN.search(content)
    recommendations_match = RECOMMENDATIONS_PATTERN.search(content)

    diagnosis = diagnosis_match.group(1).strip() if diagnosis_match else ""
    recommendations = recommendations_match.group(1).strip() if recommendations_match else ""

    return AIPrescriptionResult(
        diagnosis=diagnosis or DIAGNOSIS_FALLBACK,
        recommendations=recommendations or RECOMMENDATIONS_FALLBACK,
    )


def get_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.AI_TIMEOUT_SECONDS)


async def complete_with_perplexity(prompt: str) -> str:
    payload = {
        "model": settings.PERPLEXITY_MODEL,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        "temperature": 0.2,
        "top_p": 0.9,
        "stream": False,
    }
    headers = {
        "Authorization": f"Bearer {settings.PERPLEXITY_API_KEY}",
        "Content-Type": "application/json",
    }

    async with get_http_client() as client:
        response = await client.post(settings.PERPLEXITY_API_URL, headers=headers, json=payload)

    if response.is_error:
        raise RuntimeError(f"Perplexity API error ({response.status_code}): {response.text}")

    choices = response.json().get("choices") or []
    content = choices[0].get("message", {}).get("content") if choices else None
    if not content:
        raise RuntimeError("Empty response from Perplexity API")
    return content


async def complete_with_gemini(prompt: str) -> str:
    genai.configure(api_key=settings.GEMINI_API_KEY)
    model = genai.GenerativeModel(settings.GEMINI_MODEL, system_instruction=SYSTEM_PROMPT)
    response = await model.generate_content_async(prompt)
    if not response.text:
        raise RuntimeError("Empty response from Gemini API")
    return response.text


async def generate_ai_prescription(report: SymptomReport) -> AIPrescriptionResult:
    """
    Ask the configured completion provider for a diagnosis and general advice.

    Never raises: a disabled provider, transport failure, non-2xx response or
    empty completion all come back as a result with `error` set and empty text.
    """
    if not is_enabled():
        return AIPrescriptionResult(error=NOT_ENABLED)

    try:
        prompt = build_prompt(report)
        if settings.AI_PROVIDER == "gemini":
            content = await complete_with_gemini(prompt)
        elif settings.AI_PROVIDER == "perplexity":
            content = await complete_with_perplexity(prompt)
        else:
            raise ValueError(f"Unknown AI provider: {settings.AI_PROVIDER}")
        return parse_completion(content)
    except Exception as e:
        logger.error(f"AI prescription generation failed via {settings.AI_PROVIDER}: {e}")
        return AIPrescriptionResult(error=str(e) or e.__class__.__name__)
