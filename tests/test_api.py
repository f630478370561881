from __future__ import annotations
from functools import partial

import pytest
from fastapi.testclient import TestClient

from conftest import ProviderError, make_fake_client
from drugcheck import api
from drugcheck.services import llm
from drugcheck.services.session import Session


@pytest.fixture
def wired(fake_client):
    llm_client, completions = fake_client
    sess = Session(partial(llm.analyze, llm_client))
    api.app.dependency_overrides[api.get_session] = lambda: sess
    api.app.dependency_overrides[api.get_client] = lambda: llm_client
    yield TestClient(api.app), completions
    api.app.dependency_overrides.clear()


def test_root_and_health(wired):
    http, _ = wired
    assert http.get("/").status_code == 200
    assert http.get("/health").json()["ok"] is True


def test_roster_endpoints(wired):
    http, _ = wired
    view = http.post("/drugs", json={"name": "Warfarin"}).json()
    view = http.post("/drugs", json={"name": "warfarin"}).json()
    assert [d["name"] for d in view["roster"]] == ["Warfarin"]
    assert view["hint"] is not None

    view = http.post("/drugs", json={"name": "Aspirin"}).json()
    assert view["can_analyze"] is True

    drug_id = view["roster"][0]["id"]
    view = http.delete(f"/drugs/{drug_id}").json()
    assert [d["name"] for d in view["roster"]] == ["Aspirin"]

    view = http.delete("/drugs").json()
    assert view["roster"] == []


def test_analyze_stores_result(wired):
    http, completions = wired
    http.post("/drugs", json={"name": "Warfarin"})
    http.post("/drugs", json={"name": "Aspirin"})
    view = http.post("/analyze").json()
    assert len(completions.calls) == 1
    assert view["result"]["interactions"][0]["severity"] == "HIGH"
    assert view["error"] is None

    view = http.post("/drugs", json={"name": "Ibuprofen"}).json()
    assert view["result"] is None


def test_analyze_with_one_drug_reports_error_in_view(wired):
    http, completions = wired
    http.post("/drugs", json={"name": "Warfarin"})
    view = http.post("/analyze").json()
    assert view["error"]["category"] == "validation"
    assert completions.calls == []


def test_check_is_stateless(wired):
    http, _ = wired
    resp = http.post("/check", json={"drugs": ["Warfarin", "Aspirin"]})
    assert resp.status_code == 200
    assert resp.json()["interactions"][0]["drug1"] == "Warfarin"
    assert http.get("/session").json()["roster"] == []


def test_check_needs_two_drugs(wired):
    http, _ = wired
    resp = http.post("/check", json={"drugs": ["Warfarin", "  "]})
    assert resp.status_code == 400
    assert resp.json()["category"] == "validation"


@pytest.mark.parametrize("error, status, category", [
    (ProviderError("bad key", 401), 401, "auth"),
    (ProviderError("quota", 429), 429, "rate_limit"),
    (ProviderError("down", 503), 503, "unavailable"),
])
def test_check_maps_provider_errors(error, status, category):
    llm_client, _ = make_fake_client(error=error)
    api.app.dependency_overrides[api.get_client] = lambda: llm_client
    try:
        resp = TestClient(api.app).post("/check", json={"drugs": ["Warfarin", "Aspirin"]})
    finally:
        api.app.dependency_overrides.clear()
    assert resp.status_code == status
    assert resp.json()["category"] == category


def test_ui_flow(wired):
    http, _ = wired
    page = http.get("/ui")
    assert page.status_code == 200
    assert "Add your drugs" in page.text

    http.post("/ui/drugs", data={"name": "Warfarin"})
    page = http.post("/ui/drugs", data={"name": "Aspirin"})
    assert "Warfarin" in page.text and "Aspirin" in page.text

    page = http.post("/ui/analyze")
    assert "High risk" in page.text
    assert "Additive antiplatelet" in page.text

    page = http.post("/ui/clear")
    assert "High risk" not in page.text
