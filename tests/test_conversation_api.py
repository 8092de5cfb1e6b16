from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from menu_analyst.application.conversation.controller import (
    ANALYZE_OPTION,
    COMPARE_OPTION,
    GREETING,
    ConversationController,
)
from menu_analyst.infrastructure.analysis.mock_service import MockAnalysisService
from menu_analyst.infrastructure.scheduling.asyncio_scheduler import ImmediateScheduler
from menu_analyst.main import app
from menu_analyst.wiring.dependencies import get_controller


@pytest.fixture
def client():
    controller = ConversationController(analysis_service=MockAnalysisService(), scheduler=ImmediateScheduler())
    controller.start()
    app.dependency_overrides[get_controller] = lambda: controller
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_read_conversation_starts_with_greeting(client):
    data = client.get("/conversation").json()

    assert data["state"] == "initial"
    assert data["busy"] is False
    assert [m["content"] for m in data["messages"]] == [GREETING]


def test_analysis_flow_over_http(client):
    data = client.post("/conversation/text", json={"text": "Margherita pizza, 8€\nTiramisu, 5€"}).json()
    assert data["state"] == "awaiting_workflow_choice"
    assert data["messages"][-1]["options"] == [ANALYZE_OPTION, COMPARE_OPTION]

    data = client.post("/conversation/option", json={"option": ANALYZE_OPTION}).json()
    assert data["state"] == "awaiting_analysis_criteria"

    data = client.post("/conversation/text", json={"text": "dessert prices"}).json()
    assert data["state"] == "initial"
    contents = [m["content"] for m in data["messages"]]
    assert any("dessert prices" in c and "2 dish(es)" in c for c in contents)


def test_image_upload_for_competitor_menu(client):
    client.post("/conversation/text", json={"text": "Margherita pizza, 8€"})
    client.post("/conversation/option", json={"option": COMPARE_OPTION})

    response = client.post(
        "/conversation/image",
        files={"file": ("rival.png", b"\x89PNG-bytes", "image/png")},
    )

    data = response.json()
    assert response.status_code == 200
    assert data["state"] == "awaiting_comparison_keywords"
    assert any(m["content"] == "Image attached: rival.png" for m in data["messages"])

    data = client.post("/conversation/text", json={"text": "skip"}).json()
    assert data["state"] == "initial"
    assert any("general comparison" in m["content"] for m in data["messages"])


def test_oversized_image_is_rejected(client, monkeypatch):
    from menu_analyst.core.config import settings

    monkeypatch.setattr(settings, "MAX_IMAGE_BYTES", 4)

    response = client.post(
        "/conversation/image",
        files={"file": ("big.png", b"0123456789", "image/png")},
    )

    assert response.status_code == 413
    assert len(client.get("/conversation").json()["messages"]) == 1
