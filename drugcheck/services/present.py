from __future__ import annotations
from typing import Any, Dict, List, Optional

from drugcheck.constants.glossary import (
    ERROR_TITLES,
    NO_INTERACTIONS_MESSAGE,
    ONBOARDING_STEPS,
    SECTION_LABELS,
    SEVERITY_BADGES,
    SINGLE_DRUG_HINT,
    STANDING_DISCLAIMER,
)
from drugcheck.models import AnalysisResult, Interaction, SessionView, SeverityLevel
from drugcheck.services.session import SessionState


def severity_badge(level: Any) -> Dict[str, str]:
    sev = SeverityLevel.parse(level)
    label, css = SEVERITY_BADGES[sev.value]
    return {"level": sev.value, "label": label, "css": css}


def can_analyze(state: SessionState) -> bool:
    return len(state.roster) >= 2 and not state.loading


def roster_hint(state: SessionState) -> Optional[str]:
    # a single entry gets a hint, never an error
    return SINGLE_DRUG_HINT if len(state.roster) == 1 else None


def translate_interaction(interaction: Interaction) -> Dict[str, Any]:
    sections = []
    for key, (label, gloss) in SECTION_LABELS.items():
        value = (getattr(interaction, key) or "").strip() or "—"
        sections.append({"key": key, "label": label, "gloss": gloss, "value": value})
    return {
        "drug1": interaction.drug1,
        "drug2": interaction.drug2,
        "badge": severity_badge(interaction.severity),
        "sections": sections,
    }


def translate_result(result: AnalysisResult) -> Dict[str, Any]:
    cards: List[Dict[str, Any]] = [translate_interaction(i) for i in result.interactions]
    return {
        "summary": result.summary,
        "has_interactions": bool(cards),
        "count": len(cards),
        "cards": cards,
        "empty_message": None if cards else NO_INTERACTIONS_MESSAGE,
        "disclaimer": result.disclaimer,
        "standing_disclaimer": STANDING_DISCLAIMER,
    }


def build_view(state: SessionState) -> Dict[str, Any]:
    """Everything the HTML page needs, flattened for the template."""
    error = None
    if state.error is not None:
        error = {
            "category": state.error.category,
            "title": ERROR_TITLES.get(state.error.category, ERROR_TITLES["unknown"]),
            "message": state.error.message,
        }
    return {
        "roster": list(state.roster),
        "loading": state.loading,
        "can_analyze": can_analyze(state),
        "hint": roster_hint(state),
        "show_onboarding": not state.roster and state.result is None,
        "onboarding": ONBOARDING_STEPS,
        "error": error,
        "report": translate_result(state.result) if state.result is not None else None,
    }


def session_view(state: SessionState) -> SessionView:
    return SessionView(
        roster=list(state.roster),
        result=state.result,
        error=state.error,
        loading=state.loading,
        can_analyze=can_analyze(state),
        hint=roster_hint(state),
    )
