"""
AI Assist for job description authoring
Uses Google Gemini to draft content from a job title
"""
import json
import logging
import re
from typing import Any, Dict, Optional

import google.generativeai as genai
from pydantic import ValidationError as SchemaValidationError

from jobdesk.core.errors import UpstreamServiceError, ValidationError
from jobdesk.schemas.ai import AutoCompleteResult

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")
_DOUBLE_QUOTES = re.compile("[\u201c\u201d\u201e\u201f\u2033\u2036]")
_SINGLE_QUOTES = re.compile("[\u2018\u2019\u201a\u201b\u2032\u2035]")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def parse_model_json(text: str) -> Dict[str, Any]:
    """
    Extract the JSON object from a model response.
    Strips markdown fences and typographic quotes; raises ValueError when no
    JSON object can be read.
    """
    if not text:
        raise ValueError("Empty model response")
    cleaned = _FENCE.sub("", text.strip())
    cleaned = _DOUBLE_QUOTES.sub('"', cleaned)
    cleaned = _SINGLE_QUOTES.sub("'", cleaned).strip()

    match = _JSON_OBJECT.search(cleaned)
    if match:
        cleaned = match.group(0)
    result = json.loads(cleaned)
    if not isinstance(result, dict):
        raise ValueError("Model response is not a JSON object")
    return result


AUTO_COMPLETE_PROMPT = """Write professional content for a job description with the title "{job_title}".

Return a JSON object with exactly these keys:
- positionSummary: an overview of the role in 2-3 paragraphs
- keyResponsibilities: 6-8 responsibilities, as an array of strings
- requiredSkills: 5-7 must-have skills and qualifications, as an array of strings
- preferredSkills: 3-5 nice-to-have skills, as an array of strings

The content must be inclusive:
- no gendered terms (he/she, guys, manpower)
- no years or length of experience; say "relevant experience in" or "proficiency with"
- no age-coded words such as young, fresh, seasoned, digital native
- no physical requirements unless essential; describe outcomes, not methods
- education as "degree or equivalent practical experience"

Return only the JSON object."""


class AIAssistService:
    """Gemini-backed drafting of job description content"""

    def __init__(self, api_key: str, model_name: str = "gemini-2.0-flash", timeout: float = 10.0, model=None):
        self.api_key = api_key
        self.model_name = model_name
        self.timeout = timeout
        self._model = model

    def _get_model(self):
        if self._model is None:
            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(
                model_name=self.model_name,
                generation_config={
                    "temperature": 0.9,
                    "top_p": 0.95,
                    "top_k": 40,
                    "max_output_tokens": 2048,
                    "response_mime_type": "application/json",
                },
            )
        return self._model

    def auto_complete(self, job_title: Optional[str]) -> AutoCompleteResult:
        """
        Draft positionSummary, responsibilities and skills for a title.
        Raises UpstreamServiceError when Gemini is unavailable or returns
        something unusable.
        """
        job_title = (job_title or "").strip()
        if not job_title:
            raise ValidationError("Job title is required", field="jobTitle")
        if not self.api_key:
            logger.error("Missing Gemini API key")
            raise UpstreamServiceError("AI service is not configured")

        logger.info("Auto-complete requested", extra={"job_title": job_title})
        try:
            response = self._get_model().generate_content(
                AUTO_COMPLETE_PROMPT.format(job_title=job_title),
                request_options={"timeout": self.timeout},
            )
            raw_text = response.text
        except Exception as e:
            logger.error("Gemini auto-complete error", extra={"error": str(e)})
            raise UpstreamServiceError("Failed to generate job description")

        try:
            return AutoCompleteResult.model_validate(parse_model_json(raw_text))
        except (ValueError, SchemaValidationError) as e:
            logger.error("Error parsing AI response", extra={"error": str(e)})
            raise UpstreamServiceError("Failed to parse job description data")
