import json
from datetime import datetime, timedelta

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from clarity.core.clock import local_now
from clarity.core.config import Base, engine
from clarity.core.exceptions import ConflictError, DatabaseIntegrityError, NotFoundError, ValidationError
from clarity.services.ai_client import GeminiClient, get_ai_client
from main import app


def _ai_client(handler):
    return GeminiClient(
        api_key="test-key",
        model_name="gemini-test",
        base_url="https://ai.example.test/v1beta/models",
        transport=httpx.MockTransport(handler),
    )


def _offline(request):
    raise httpx.ConnectError("offline", request=request)


@pytest.fixture
def client():
    Base.metadata.create_all(bind=engine)
    app.dependency_overrides[get_ai_client] = lambda: _ai_client(_offline)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


def ema_payload(**overrides):
    payload = {
        "anger": 1,
        "anxiety": 2,
        "sadness": 1,
        "happiness": 4,
        "recentStressfulEvent": False,
        "sleepHours": 7.5,
        "sleepQuality": 4,
        "caffeineRecent": True,
    }
    payload.update(overrides)
    return payload


def session_payload(**overrides):
    payload = {
        "gameType": "GO_NO_GO",
        "difficultyLevel": 2,
        "score": 80,
        "accuracy": 0.9,
        "reactionTimeMs": 350,
        "omissionErrors": 1,
        "commissionErrors": 0,
    }
    payload.update(overrides)
    return payload


# =====================================================================
# BASICS
# =====================================================================

def test_health_and_root(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").json()["endpoints"]["analytics"] == "/analytics"


def test_domain_errors_have_handlers():
    assert {NotFoundError, ConflictError, ValidationError, DatabaseIntegrityError} <= set(app.exception_handlers)


# =====================================================================
# CHECK-INS AND SESSIONS
# =====================================================================

def test_create_ema_assigns_id_and_timestamp(client):
    response = client.post("/emas", json=ema_payload())

    assert response.status_code == 201
    body = response.json()
    assert body["id"]
    assert body["timestamp"]
    assert body["sleepHours"] == 7.5
    assert body["alcoholUse"] == "NONE"


def test_ema_validation(client):
    assert client.post("/emas", json=ema_payload(happiness=6)).status_code == 422


def test_duplicate_ema_id_conflicts(client):
    assert client.post("/emas", json=ema_payload(id="fixed")).status_code == 201
    response = client.post("/emas", json=ema_payload(id="fixed"))
    assert response.status_code == 409


def test_latest_ema_and_check_in_status(client):
    assert client.get("/emas/latest").status_code == 404
    assert client.get("/emas/check-in-status").json()["completed"] is False

    yesterday = (local_now() - timedelta(days=1)).isoformat()
    client.post("/emas", json=ema_payload(id="old", timestamp=yesterday))
    assert client.get("/emas/check-in-status").json()["completed"] is False

    client.post("/emas", json=ema_payload(id="new"))
    assert client.get("/emas/latest").json()["id"] == "new"
    assert client.get("/emas/check-in-status").json()["completed"] is True


def test_undecodable_check_in_is_reported_as_integrity_error(client):
    ema = client.post("/emas", json=ema_payload()).json()
    with engine.begin() as conn:
        conn.execute(text("UPDATE ema_entry SET alcohol_use = 'WINE' WHERE id = :id"), {"id": ema["id"]})

    latest = client.get("/emas/latest")
    assert latest.status_code == 500
    assert latest.json() == {"detail": "Stored data could not be decoded"}

    linked = client.post("/sessions", json=session_payload(emaId=ema["id"]))
    assert linked.status_code == 500


def test_session_baseline_snapshot(client):
    calm = client.post("/emas", json=ema_payload()).json()
    stressed = client.post("/emas", json=ema_payload(recentStressfulEvent=True)).json()

    baseline = client.post("/sessions", json=session_payload(emaId=calm["id"])).json()
    not_baseline = client.post("/sessions", json=session_payload(emaId=stressed["id"])).json()
    dangling = client.post("/sessions", json=session_payload(emaId="missing")).json()

    assert baseline["isBaselineSession"] is True
    assert not_baseline["isBaselineSession"] is False
    assert dangling["isBaselineSession"] is False
    assert dangling["emaId"] == "missing"


def test_list_sessions_filtered_by_game(client):
    client.post("/sessions", json=session_payload())
    client.post("/sessions", json=session_payload(gameType="VISUAL_SEARCH"))

    assert len(client.get("/sessions").json()) == 2
    only_search = client.get("/sessions", params={"gameType": "VISUAL_SEARCH"}).json()
    assert [s["gameType"] for s in only_search] == ["VISUAL_SEARCH"]


# =====================================================================
# ANALYTICS
# =====================================================================

def test_summary_is_null_without_sessions(client):
    response = client.get("/analytics/summary")
    assert response.status_code == 200
    assert response.json() is None


def test_analytics_endpoints(client):
    ema = client.post("/emas", json=ema_payload()).json()
    for score in (60, 70, 80, 90, 100):
        client.post("/sessions", json=session_payload(score=score, emaId=ema["id"]))

    summary = client.get("/analytics/summary").json()
    assert summary["totalSessions"] == 5
    assert summary["bestGame"] == "GO_NO_GO"
    assert summary["averageScorePerGame"]["GO_NO_GO"] == 80.0

    profile = client.get("/analytics/profile").json()
    assert profile["currentStreak"] == 1
    assert profile["favoriteGame"] == "GO_NO_GO"
    assert profile["totalEmas"] == 1

    weekly = client.get("/analytics/weekly").json()
    assert len(weekly) == 7
    assert weekly[-1] == {"label": "Today", "sessionCount": 5}

    score = client.get("/analytics/score", params={"period": "LAST_14_DAYS"}).json()
    assert score["breakdown"]["accuracyScore"] == 45
    assert score["breakdown"]["varietyScore"] == 3

    report = client.get("/analytics/report", params={"period": "LAST_30_DAYS"}).json()
    assert report["reportPeriod"] == "LAST_30_DAYS"
    assert report["reportPeriodLabel"] == "Last 30 Days"
    assert report["totalSessions"] == 5
    assert report["performanceScore"] == score["score"]
    assert len(report["recentSessions"]) == 5
    assert report["gameStats"]["GO_NO_GO"]["bestScore"] == 100


def test_report_rejects_unknown_period(client):
    assert client.get("/analytics/report", params={"period": "LAST_YEAR"}).status_code == 422


# =====================================================================
# COACH
# =====================================================================

def test_insights_fall_back_when_ai_is_offline(client):
    insights = client.get("/coach/insights").json()

    assert insights[0]["title"] == "Daily Tip"
    assert insights[0]["type"] == "TIP"
    assert insights[1]["title"] == "Gathering Data"


def test_insights_with_ai_answer(client):
    app.dependency_overrides[get_ai_client] = lambda: _ai_client(
        lambda request: httpx.Response(
            200, json={"candidates": [{"content": {"parts": [{"text": "Hydrate first."}]}}]}
        )
    )
    insights = client.get("/coach/insights").json()
    assert insights[0] == {
        "title": "Daily Coach Wisdom",
        "description": "Hydrate first.",
        "type": "AI_GENERATED",
        "relatedMetric": None,
        "score": 1.0,
    }


def test_chat_fallback_is_stored_as_error(client):
    response = client.post("/coach/chat", json={"content": "How did I do this week?"})

    assert response.status_code == 201
    reply = response.json()
    assert reply["content"] == "Sorry, I couldn't connect to the server. Please try again later."
    assert reply["isUser"] is False
    assert reply["isError"] is True

    history = client.get("/coach/messages").json()
    assert history["total"] == 2
    assert [m["isUser"] for m in history["messages"]] == [True, False]


def test_chat_prompt_carries_context(client):
    prompts = []

    def handler(request):
        prompts.append(json.loads(request.content)["contents"][0]["parts"][0]["text"])
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "Keep going!"}]}}]})

    app.dependency_overrides[get_ai_client] = lambda: _ai_client(handler)
    client.post("/sessions", json=session_payload(score=77))

    reply = client.post("/coach/chat", json={"content": "Any tips?"}).json()

    assert reply["content"] == "Keep going!"
    assert reply["isError"] is False
    assert "GO_NO_GO: 77 pts" in prompts[0]
    assert "USER MESSAGE: Any tips?" in prompts[0]


def test_chat_rejects_empty_message(client):
    assert client.post("/coach/chat", json={"content": ""}).status_code == 422


# =====================================================================
# EXPORT
# =====================================================================

def test_export_and_reimport(client):
    ema = client.post("/emas", json=ema_payload(timestamp=datetime(2026, 3, 2, 8).isoformat())).json()
    client.post("/sessions", json=session_payload(emaId=ema["id"]))

    response = client.get("/export")
    assert response.headers["content-type"].startswith("application/json")
    assert "attachment" in response.headers["content-disposition"]
    exported = response.json()
    assert len(exported["emas"]) == 1
    assert len(exported["sessions"]) == 1

    result = client.post("/export/import", content=response.content).json()
    assert result == {"emasImported": 0, "sessionsImported": 0, "emasSkipped": 1, "sessionsSkipped": 1}


def test_import_malformed_file(client):
    response = client.post("/export/import", content=b"{not json")
    assert response.status_code == 422
