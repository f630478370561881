from __future__ import annotations
from enum import Enum
from typing import Any, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator


class SeverityLevel(str, Enum):
    HIGH = "HIGH"
    MODERATE = "MODERATE"
    LOW = "LOW"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Any) -> "SeverityLevel":
        # anything unrecognised (or missing) falls back to UNKNOWN
        if isinstance(value, cls):
            return value
        s = str(value or "").strip().upper()
        try:
            return cls(s)
        except ValueError:
            return cls.UNKNOWN


class DrugEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class Interaction(BaseModel):
    model_config = ConfigDict(frozen=True)

    drug1: str
    drug2: str
    severity: SeverityLevel = SeverityLevel.UNKNOWN
    description: str
    mechanism: str
    management: str

    @field_validator("severity", mode="before")
    @classmethod
    def _coerce_severity(cls, v: Any) -> SeverityLevel:
        return SeverityLevel.parse(v)


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    interactions: Tuple[Interaction, ...]
    summary: str
    disclaimer: str


class AnalysisError(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str
    message: str


# ----------------------------
# HTTP request / response models
# ----------------------------
class AddDrugRequest(BaseModel):
    name: str = Field(..., description="Drug name as typed by the user")


class CheckRequest(BaseModel):
    drugs: List[str] = Field(..., description="List of drug names")


class SessionView(BaseModel):
    roster: List[DrugEntry]
    result: Optional[AnalysisResult] = None
    error: Optional[AnalysisError] = None
    loading: bool = False
    can_analyze: bool = False
    hint: Optional[str] = None
