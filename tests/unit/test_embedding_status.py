"""Tests for embedding metadata parsing and the status payload."""

from __future__ import annotations

import json

import pytest

from buildright.embeddings.status import (
    NO_EMBEDDINGS_MESSAGE,
    EmbeddingStatus,
    belongs_to_chat,
    parse_metadata,
)

CHAT_ID = "7f0c1c8e-4b59-4d8f-9a55-0e0d5e0b6a11"


class TestParseMetadata:
    def test_dict_passthrough(self):
        assert parse_metadata({"chatId": CHAT_ID}) == {"chatId": CHAT_ID}

    def test_serialized_string(self):
        assert parse_metadata(json.dumps({"chatId": CHAT_ID, "page": 3})) == {
            "chatId": CHAT_ID,
            "page": 3,
        }

    @pytest.mark.parametrize("raw", ["{not json", "", "[1, 2]", "42", None, 7, ["chatId"]])
    def test_unreadable_metadata_is_none(self, raw):
        assert parse_metadata(raw) is None


class TestBelongsToChat:
    def test_chat_column_wins(self):
        assert belongs_to_chat(CHAT_ID, None, CHAT_ID)
        assert not belongs_to_chat("other-chat", {"chatId": CHAT_ID}, CHAT_ID)

    def test_falls_back_to_metadata(self):
        assert belongs_to_chat(None, {"chatId": CHAT_ID}, CHAT_ID)
        assert belongs_to_chat(None, json.dumps({"chatId": CHAT_ID}), CHAT_ID)

    def test_non_matching_or_malformed_metadata(self):
        assert not belongs_to_chat(None, {"chatId": "someone-else"}, CHAT_ID)
        assert not belongs_to_chat(None, {"documentId": "abc"}, CHAT_ID)
        assert not belongs_to_chat(None, "{broken", CHAT_ID)


class TestEmbeddingStatus:
    def test_empty_status_payload(self):
        data = EmbeddingStatus(chat_id=CHAT_ID).to_dict()

        assert data == {
            "chatId": CHAT_ID,
            "embeddingsAvailable": False,
            "summary": {"total": 0, "textual": 0, "visual": 0, "combined": 0},
            "message": NO_EMBEDDINGS_MESSAGE,
            "searchReady": False,
        }

    def test_ready_message(self):
        status = EmbeddingStatus(chat_id=CHAT_ID, total=5, textual=3, visual=1, combined=1)

        data = status.to_dict()

        assert data["embeddingsAvailable"] is True
        assert data["searchReady"] is True
        assert data["message"] == "5 embeddings ready for semantic search"
