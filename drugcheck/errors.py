from __future__ import annotations

from typing import Optional


class InteractionCheckError(Exception):
    """
    Base for every failure surfaced to the user.
    `category` is a stable tag the UI and API use to pick wording / status codes.
    """

    category = "unknown"
    default_message = "Unexpected error while contacting the analysis service. Please try again."

    def __init__(self, message: Optional[str] = None):
        self.message = (message or "").strip() or self.default_message
        super().__init__(self.message)


class ValidationError(InteractionCheckError):
    category = "validation"
    default_message = "need at least two drugs"


class AuthError(InteractionCheckError):
    category = "auth"
    default_message = "The API key is missing or invalid. Check the OPENAI_API_KEY setting."


class RateLimitError(InteractionCheckError):
    category = "rate_limit"
    default_message = "Usage limit reached for now. Please wait a moment and try again."


class ServiceUnavailableError(InteractionCheckError):
    category = "unavailable"
    default_message = "The analysis service is under heavy load. Please try again shortly."


class DataFormatError(InteractionCheckError):
    category = "data_format"
    default_message = "Could not process the medical data returned by the service. Please try again."


class UnknownProviderError(InteractionCheckError):
    category = "unknown"


class AnalysisInProgressError(InteractionCheckError):
    category = "busy"
    default_message = "An analysis is already running."
