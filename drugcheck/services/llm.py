# drugcheck/services/llm.py
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional, Sequence

from openai import OpenAI
from pydantic import ValidationError as SchemaError

from drugcheck.errors import (
    AuthError,
    DataFormatError,
    InteractionCheckError,
    RateLimitError,
    ServiceUnavailableError,
    UnknownProviderError,
    ValidationError,
)
from drugcheck.models import AnalysisResult, SeverityLevel

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4.1-mini"


# ----------------------------
# Client factory
# ----------------------------
def make_client(api_key: Optional[str]) -> Optional[Any]:
    """
    Create an OpenAI client when an API key is configured.
    Returns None otherwise; analyze() turns that into an AuthError at query time.
    """
    api_key = (api_key or "").strip()
    if not api_key:
        return None
    return OpenAI(api_key=api_key)


# ----------------------------
# Request contract
# ----------------------------
SYSTEM_PROMPT = (
    "You are an expert pharmacist and a friend to the patient. Your goal is to make complex\n"
    "medical information understandable for everyone while staying scientifically accurate for doctors.\n"
    "RULES:\n"
    "1. description: very simple, clear language an ordinary patient understands\n"
    "   (e.g. 'this drug may weaken the other one, which can raise blood pressure').\n"
    "2. mechanism: precise scientific terms for clinicians\n"
    "   (e.g. 'Induction of CYP3A4 enzymes reduces plasma concentration').\n"
    "3. When naming a disease or side effect, give the common name with the medical term beside it.\n"
    "4. management: direct, practical advice (e.g. 'separate doses by two hours' or\n"
    "   'ask your doctor to adjust the dose').\n"
    "5. Do not exaggerate, but be firm about dangerous interactions.\n"
    "If there are no interactions, clearly reassure the user in the summary.\n"
    "Return JSON only, matching the provided schema."
)

_STRING = {"type": "string"}

RESPONSE_SCHEMA: Dict[str, Any] = {
    "name": "DrugInteractionReport",
    "strict": True,
    "schema": {
        "type": "object",
        "properties": {
            "summary": {"type": "string", "description": "Short plain-language overview for the patient."},
            "disclaimer": {"type": "string", "description": "Reminder that this does not replace a doctor."},
            "interactions": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "drug1": _STRING,
                        "drug2": _STRING,
                        "severity": {"type": "string", "enum": [s.value for s in SeverityLevel]},
                        "description": {"type": "string", "description": "What happens, for the patient."},
                        "mechanism": {"type": "string", "description": "Scientific explanation for the clinician."},
                        "management": {"type": "string", "description": "Practical steps to handle it."},
                    },
                    "required": ["drug1", "drug2", "severity", "description", "mechanism", "management"],
                    "additionalProperties": False,
                },
            },
        },
        "required": ["summary", "interactions", "disclaimer"],
        "additionalProperties": False,
    },
}


def build_prompt(drugs: Sequence[str]) -> str:
    return (
        f"Drug list: {', '.join(drugs)}\n\n"
        "Task: a thorough analysis of the drug-drug interactions between these drugs."
    )


# ----------------------------
# Reply parsing
# ----------------------------
_FENCE_RE = re.compile(r"^\s*```[\w+-]*[ \t]*\n?|\n?[ \t]*```\s*$")


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text or "").strip()


def parse_reply(text: Optional[str]) -> AnalysisResult:
    if not text or not text.strip():
        raise DataFormatError("No reply received from the analysis service.")

    raw = strip_code_fences(text)
    try:
        data = json.loads(raw)
        return AnalysisResult.model_validate(data)
    except (json.JSONDecodeError, SchemaError) as e:
        logger.warning("Reply did not match the interaction schema: %s", e)
        raise DataFormatError() from e


# ----------------------------
# Provider failure classification
# ----------------------------
_AUTH_HINTS = ("api key", "api_key", "apikey", "authentication", "unauthorized", "permission")
_RATE_HINTS = ("quota", "rate limit", "rate_limit", "too many requests")
_UNAVAILABLE_HINTS = ("overloaded", "unavailable", "server error")


def _status_of(error: BaseException) -> Optional[int]:
    for attr in ("status_code", "status"):
        v = getattr(error, attr, None)
        try:
            return int(v)
        except (TypeError, ValueError):
            continue
    return None


def classify_provider_error(error: BaseException) -> InteractionCheckError:
    if isinstance(error, InteractionCheckError):
        return error

    status = _status_of(error)
    message = str(getattr(error, "message", "") or error or "").strip()
    lowered = message.lower()

    # an explicit status code wins over whatever the message text says
    if status in (401, 403):
        return AuthError()
    if status == 429:
        return RateLimitError()
    if status is not None and 500 <= status < 600:
        return ServiceUnavailableError()

    if any(h in lowered for h in _AUTH_HINTS):
        return AuthError()
    if any(h in lowered for h in _RATE_HINTS):
        return RateLimitError()
    if any(h in lowered for h in _UNAVAILABLE_HINTS):
        return ServiceUnavailableError()
    return UnknownProviderError(message)


# ----------------------------
# Analyze
# ----------------------------
def analyze(
    client: Optional[Any],
    drugs: Sequence[str],
    model: str = DEFAULT_MODEL,
) -> AnalysisResult:
    """
    Ask the provider for every pairwise interaction among `drugs`.

    - Fewer than two names fails before any call is made
    - The reply is validated against RESPONSE_SCHEMA; anything else is a DataFormatError
    - No retries; provider failures are classified and re-raised
    """
    drugs = list(drugs)
    if len(drugs) < 2:
        raise ValidationError()
    if client is None:
        raise AuthError()

    try:
        resp = client.chat.completions.create(
            model=model,
            temperature=0,
            response_format={"type": "json_schema", "json_schema": RESPONSE_SCHEMA},
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(drugs)},
            ],
        )
    except Exception as e:
        err = classify_provider_error(e)
        logger.error("Provider call failed (%s): %s", err.category, e)
        raise err from e

    try:
        text = resp.choices[0].message.content
    except (AttributeError, IndexError, TypeError) as e:
        raise DataFormatError("No reply received from the analysis service.") from e

    return parse_reply(text)
