"""Tests for buildright.web.routes.embeddings - Embedding readiness route."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from buildright.embeddings import EmbeddingStatus
from buildright.web.auth import CurrentUser, require_user
from buildright.web.routes import embeddings


@pytest.fixture
def app():
    test_app = FastAPI()
    test_app.include_router(embeddings.router)
    test_app.dependency_overrides[require_user] = lambda: CurrentUser(user_id="user-1")
    return test_app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def mock_db_session():
    session = AsyncMock()

    async_cm = AsyncMock()
    async_cm.__aenter__.return_value = session
    async_cm.__aexit__.return_value = None

    return async_cm


class TestEmbeddingStatusRoute:
    """Tests for GET /api/embeddings/status route."""

    @patch("buildright.web.routes.embeddings.get_session")
    def test_missing_chat_id_returns_400(self, mock_get_session, client):
        response = client.get("/api/embeddings/status")

        assert response.status_code == 400
        assert response.json() == {"error": "chatId parameter is required"}
        mock_get_session.assert_not_called()

    @patch("buildright.web.routes.embeddings.get_session")
    def test_empty_chat_id_returns_400(self, mock_get_session, client):
        response = client.get("/api/embeddings/status?chatId=")

        assert response.status_code == 400

    @patch("buildright.web.routes.embeddings.get_embedding_status", new_callable=AsyncMock)
    @patch("buildright.web.routes.embeddings.get_session")
    def test_returns_counts(self, mock_get_session, mock_status, client, mock_db_session):
        mock_get_session.return_value = mock_db_session
        mock_status.return_value = EmbeddingStatus(
            chat_id="chat-1", total=4, textual=2, visual=1, combined=1
        )

        response = client.get("/api/embeddings/status?chatId=chat-1")

        assert response.status_code == 200
        data = response.json()
        assert data["chatId"] == "chat-1"
        assert data["embeddingsAvailable"] is True
        assert data["searchReady"] is True
        assert data["summary"] == {"total": 4, "textual": 2, "visual": 1, "combined": 1}
        assert data["message"] == "4 embeddings ready for semantic search"
        assert mock_status.call_args.args[1] == "chat-1"

    @patch("buildright.web.routes.embeddings.get_embedding_status", new_callable=AsyncMock)
    @patch("buildright.web.routes.embeddings.get_session")
    def test_no_embeddings(self, mock_get_session, mock_status, client, mock_db_session):
        mock_get_session.return_value = mock_db_session
        mock_status.return_value = EmbeddingStatus(chat_id="chat-2")

        response = client.get("/api/embeddings/status?chatId=chat-2")

        assert response.status_code == 200
        data = response.json()
        assert data["embeddingsAvailable"] is False
        assert data["message"] == "No embeddings found. Upload a PDF to generate embeddings."

    @patch("buildright.web.routes.embeddings.get_embedding_status", new_callable=AsyncMock)
    @patch("buildright.web.routes.embeddings.get_session")
    def test_failure_returns_500(self, mock_get_session, mock_status, client, mock_db_session):
        mock_get_session.return_value = mock_db_session
        mock_status.side_effect = RuntimeError("timeout")

        response = client.get("/api/embeddings/status?chatId=chat-1")

        assert response.status_code == 500
        assert response.json() == {"error": "Status check failed", "details": "timeout"}

    @patch("buildright.web.auth.validate_session", return_value=None)
    @patch("buildright.web.routes.embeddings.get_session")
    def test_requires_session(self, mock_get_session, mock_validate):
        test_app = FastAPI()
        test_app.include_router(embeddings.router)

        response = TestClient(test_app).get("/api/embeddings/status?chatId=chat-1")

        assert response.status_code == 401
        mock_get_session.assert_not_called()
