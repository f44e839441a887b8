"""
Bias Detection Service
Scans job description fields for exclusionary language.

Gemini does the analysis when it is configured and reachable; otherwise a
keyword heuristic runs locally so callers always get a result.
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple, Union

import google.generativeai as genai
from pydantic import ValidationError as SchemaValidationError

from jobdesk.schemas.bias import BiasFinding
from jobdesk.services.ai_assist import parse_model_json

logger = logging.getLogger(__name__)

# Checked in this order; the first category with a hit wins
BIAS_INDICATORS: Dict[str, List[str]] = {
    "gender": [
        "he", "him", "his", "she", "her", "hers", "man", "woman", "men",
        "women", "guys", "gals", "male", "female", "gentleman", "lady",
        "ladies", "gentlemen", "manpower", "mankind", "chairman", "foreman",
        "policeman", "stewardess",
    ],
    "age": [
        "young", "old", "fresh", "energetic", "recent graduate",
        "digital native", "seasoned", "veteran", "experienced", "mature",
    ],
    "race": [
        "articulate", "intelligent", "well-spoken", "culture fit", "cultural fit",
    ],
    "ability": [
        "able-bodied", "physically fit", "stand for long periods", "lift", "carry",
    ],
}

CATEGORY_GUIDANCE: Dict[str, Tuple[str, str]] = {
    "gender": (
        "Use gender-neutral language",
        "The text contains gender-specific terms that could be more inclusive",
    ),
    "age": (
        "Use age-inclusive language",
        "The text contains age-related terms that might exclude some candidates",
    ),
    "race": (
        "Use culturally inclusive language",
        "The text contains terms that could have racial implications",
    ),
    "ability": (
        "Consider accessibility in requirements",
        "The text contains terms that might exclude people with different abilities",
    ),
}

# Short pronouns match whole words only; other terms also match inflected forms
WHOLE_WORD_TERMS = {"he", "him", "his", "she", "her", "hers", "man", "men"}


def _indicator_pattern(term: str) -> "re.Pattern":
    suffix = r"\b" if term in WHOLE_WORD_TERMS else ""
    return re.compile(r"\b" + re.escape(term) + suffix, re.IGNORECASE)


_INDICATOR_PATTERNS = {
    category: [_indicator_pattern(term) for term in terms]
    for category, terms in BIAS_INDICATORS.items()
}

NOTE_MISSING_KEY = "Analysis performed locally due to missing API key"
NOTE_CONNECTIVITY = "Analysis performed locally due to AI service connectivity issues"
NOTE_PARSE_ERROR = "Fell back to local analysis due to API response parsing error"
NOTE_SUPPLEMENTED = "Some fields had to be supplemented with default analysis"

BIAS_PROMPT = """Analyze the following job description fields for bias.

Context information:
{context}

Fields to analyze:
{fields}

Check for gender, age, race, ability and other forms of bias, for example:
- gender: gendered terms, stereotypes about men or women
- age: terms that favor younger or older workers
- race/culture: terms with racial implications or cultural assumptions
- ability: requirements that unnecessarily exclude people with disabilities

Return one JSON object keyed by field name:
{{
  "<fieldName>": {{
    "hasBias": boolean,
    "biasType": string or null,
    "suggestions": array of strings,
    "explanation": string
  }}
}}

In "suggestions", give the replacement wording itself, keeping phrases that
contain no bias unchanged and keeping bullet points. If "smart men" is biased,
suggest ["talented individuals", "skilled professionals"], not
["Replace 'smart men' with 'talented individuals'"].

Return only valid JSON."""


def local_bias_detection(text: Optional[str]) -> Dict[str, Any]:
    """Deterministic keyword scan used when Gemini is unavailable"""
    if not text:
        return BiasFinding(explanation="No content to analyze").model_dump()

    for category, patterns in _INDICATOR_PATTERNS.items():
        if any(pattern.search(text) for pattern in patterns):
            suggestion, explanation = CATEGORY_GUIDANCE[category]
            return BiasFinding(
                hasBias=True,
                biasType=category,
                suggestions=[suggestion],
                explanation=explanation,
            ).model_dump()

    return BiasFinding(explanation="No obvious bias detected").model_dump()


def prepare_fields(fields_to_analyze: Dict[str, Union[str, List[Optional[str]], None]]) -> Dict[str, str]:
    """
    Keep fields with content. List items are split on commas and joined
    one per line.
    """
    prepared = {}
    for field, content in (fields_to_analyze or {}).items():
        if isinstance(content, list):
            parts = []
            for item in content:
                if isinstance(item, str):
                    parts.extend(part.strip() for part in re.split(r",\s*", item) if part.strip())
            if parts:
                prepared[field] = "\n".join(parts)
        elif isinstance(content, str) and content.strip():
            prepared[field] = content
    return prepared


class BiasDetectionService:
    """
    Per-field bias analysis with a guaranteed local fallback.
    analyze() never raises for AI failures.
    """

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
                    "temperature": 0.2,
                    "top_p": 0.95,
                    "max_output_tokens": 2048,
                    "response_mime_type": "application/json",
                },
            )
        return self._model

    def analyze(
        self,
        context_fields: Optional[Dict[str, Any]],
        fields_to_analyze: Dict[str, Union[str, List[Optional[str]], None]],
    ) -> Tuple[Dict[str, Dict[str, Any]], Optional[str]]:
        """
        Returns (recommendations keyed by field, note). The note says why
        the local heuristic was used, or that some fields were filled in.
        """
        fields = prepare_fields(fields_to_analyze)
        logger.info("Bias analysis requested", extra={"fields_count": len(fields)})
        if not fields:
            return {}, None

        fallback = {field: local_bias_detection(text) for field, text in fields.items()}

        if not self.api_key:
            logger.warning("Missing Gemini API key, using local bias analysis")
            return fallback, NOTE_MISSING_KEY

        prompt = BIAS_PROMPT.format(
            context=json.dumps(context_fields or {}, indent=2, default=str),
            fields=json.dumps(fields, indent=2),
        )
        try:
            response = self._get_model().generate_content(
                prompt,
                request_options={"timeout": self.timeout},
            )
            raw_text = response.text
        except Exception as e:
            logger.error("Gemini API error", extra={"error": str(e)})
            return fallback, NOTE_CONNECTIVITY

        try:
            analysis = parse_model_json(raw_text)
            recommendations = {}
            supplemented = False
            for field in fields:
                entry = analysis.get(field)
                if not entry:
                    supplemented = True
                    recommendations[field] = BiasFinding(
                        explanation="No analysis available for this field"
                    ).model_dump()
                else:
                    recommendations[field] = BiasFinding.model_validate(entry).model_dump()
        except (ValueError, SchemaValidationError) as e:
            logger.error(
                "Failed to parse AI response",
                extra={"error": str(e), "raw_response": (raw_text or "")[:500]},
            )
            return fallback, NOTE_PARSE_ERROR

        return recommendations, NOTE_SUPPLEMENTED if supplemented else None
