from __future__ import annotations
import json
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest


WARFARIN_ASPIRIN = {
    "summary": "One serious interaction was found.",
    "disclaimer": "This does not replace your doctor.",
    "interactions": [
        {
            "drug1": "Warfarin",
            "drug2": "Aspirin",
            "severity": "HIGH",
            "description": "Taking both raises the chance of bleeding.",
            "mechanism": "Additive antiplatelet and anticoagulant effects.",
            "management": "Avoid the combination unless your doctor says otherwise.",
        }
    ],
}


class FakeCompletions:
    """Stands in for client.chat.completions; records every create() call."""

    def __init__(self, reply: Optional[str] = None, error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_fake_client(reply: Optional[str] = None, error: Optional[Exception] = None):
    completions = FakeCompletions(reply=reply, error=error)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


class ProviderError(Exception):
    """Shaped like an SDK status error: a message plus an optional status code."""

    def __init__(self, message: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@pytest.fixture
def warfarin_reply() -> str:
    return json.dumps(WARFARIN_ASPIRIN)


@pytest.fixture
def fake_client(warfarin_reply):
    return make_fake_client(reply=warfarin_reply)
