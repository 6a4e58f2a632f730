# tests for journal router — entry crud, stored analysis, analyze pipeline
# the llm is never called; extract_all_entities is patched per test

import pytest
from unittest.mock import patch, AsyncMock

from tests.conftest import USER_ID
from journaling_app.models.analysis import (
    AnalysisResult,
    SentimentAnalysis,
    PeopleMentioned,
    FinanceCue,
    TaskMentioned,
)

EXTRACT = "journaling_app.services.analysis_service.extract_all_entities"


def _analysis(**overrides):
    fields = dict(
        sentiment=SentimentAnalysis(overall="positive", confidence=0.9, emotions=["joy"]),
        people=[PeopleMentioned(name="maria", relationship="friend", sentiment="positive", context="lunch")],
        finance=[
            FinanceCue(amount=25, category="expense", description="Lunch"),
            FinanceCue(amount=None, category="expense", description="Thinking about saving"),
        ],
        tasks=[TaskMentioned(description="Finish the project report", priority="high", deadline="Friday")],
        locations=[],
        temporal=[],
        life_areas=[],
    )
    fields.update(overrides)
    return AnalysisResult(**fields)


class TestListEntries:
    """listing own entries"""

    async def test_list_entries_newest_first(self, auth_client):
        resp = await auth_client.get("/journal/entries")
        assert resp.status_code == 200
        data = resp.json()
        assert [e["id"] for e in data] == ["entry0000001", "entry0000002"]
        assert all(e["userId"] == USER_ID for e in data)

    async def test_list_entries_flags(self, auth_client):
        resp = await auth_client.get("/journal/entries")
        draft, completed = resp.json()
        assert draft["canBeAnalyzed"] is True
        assert completed["canBeAnalyzed"] is False
        assert draft["userConfirmed"] == {"transcription": False, "analysis": False}

    async def test_list_entries_limit_and_skip(self, auth_client):
        resp = await auth_client.get("/journal/entries?limit=1&skip=1")
        assert [e["id"] for e in resp.json()] == ["entry0000002"]

    async def test_list_entries_no_auth(self, client):
        resp = await client.get("/journal/entries")
        assert resp.status_code in (401, 403)


class TestCreateEntry:
    """creating entries"""

    async def test_create_text_entry(self, auth_client, mock_db):
        resp = await auth_client.post("/journal/entries", json={
            "content": "Quiet evening, read a book.",
            "tags": ["reading"],
            "mood": "😌",
        })
        assert resp.status_code == 201
        data = resp.json()
        assert data["id"]
        assert data["message"] == "Journal entry created"

        stored = mock_db.journal_entries.inserted[0]
        assert stored["user_id"] == USER_ID
        assert stored["processing_status"] == "draft"
        assert stored["processing_type"] == "full-analysis"
        assert stored["tags"] == ["reading"]

    async def test_create_voice_entry(self, auth_client, mock_db):
        resp = await auth_client.post("/journal/entries", json={
            "audioUrl": "data:audio/webm;base64,AAAA",
            "transcription": "Walked to the park.",
            "entryType": "voice",
            "processingType": "transcribe-only",
        })
        assert resp.status_code == 201
        stored = mock_db.journal_entries.inserted[0]
        assert stored["entry_type"] == "voice"
        assert stored["processing_type"] == "transcribe-only"

    async def test_create_entry_requires_text(self, auth_client):
        resp = await auth_client.post("/journal/entries", json={"content": "   "})
        assert resp.status_code == 422

    async def test_create_entry_bad_processing_type(self, auth_client):
        resp = await auth_client.post("/journal/entries", json={
            "content": "hello",
            "processingType": "summarize",
        })
        assert resp.status_code == 422


class TestGetEntry:
    """single entry with stored analysis"""

    async def test_get_entry_without_analysis(self, auth_client):
        resp = await auth_client.get("/journal/entries/entry0000001")
        assert resp.status_code == 200
        data = resp.json()
        assert data["entry"]["id"] == "entry0000001"
        assert data["analysis"] is None

    async def test_get_entry_with_analysis(self, auth_client):
        resp = await auth_client.get("/journal/entries/entry0000002")
        data = resp.json()
        assert data["analysis"]["id"] == "analysis0001"
        assert data["analysis"]["sentiment"]["overall"] == "negative"
        assert data["analysis"]["people"][0]["name"] == "Boss"

    async def test_get_other_users_entry(self, auth_client):
        resp = await auth_client.get("/journal/entries/entry0000099")
        assert resp.status_code == 403

    async def test_get_missing_entry(self, auth_client):
        resp = await auth_client.get("/journal/entries/nope")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Entry not found"


class TestUpdateEntry:
    """editing entries"""

    async def test_update_content(self, auth_client, mock_db):
        resp = await auth_client.put("/journal/entries/entry0000001", json={
            "content": "Edited text",
            "userConfirmedTranscription": True,
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["content"] == "Edited text"
        assert data["userConfirmed"]["transcription"] is True

        stored = await mock_db.journal_entries.find_one({"id": "entry0000001"})
        assert stored["content"] == "Edited text"
        assert stored["tags"] == ["work"]

    async def test_update_other_users_entry(self, auth_client):
        resp = await auth_client.put("/journal/entries/entry0000099", json={"content": "x"})
        assert resp.status_code == 403


class TestDeleteEntry:
    """deleting entries"""

    async def test_delete_entry_unlinks_derived_records(self, auth_client, mock_db):
        resp = await auth_client.delete("/journal/entries/entry0000001")
        assert resp.status_code == 204

        assert await mock_db.journal_entries.find_one({"id": "entry0000001"}) is None
        finance = await mock_db.finance_entries.find_one({"id": "finance00001"})
        task = await mock_db.tasks.find_one({"id": "task00000001"})
        assert finance["journal_entry_id"] is None
        assert task["journal_entry_id"] is None

    async def test_delete_entry_removes_analysis(self, auth_client, mock_db):
        resp = await auth_client.delete("/journal/entries/entry0000002")
        assert resp.status_code == 204
        assert await mock_db.analysis_results.find_one({"journal_entry_id": "entry0000002"}) is None

    async def test_delete_missing_entry(self, auth_client):
        resp = await auth_client.delete("/journal/entries/nope")
        assert resp.status_code == 404


class TestStoredAnalysis:
    """reading and confirming an entry's analysis"""

    async def test_get_analysis(self, auth_client):
        resp = await auth_client.get("/journal/entries/entry0000002/analysis")
        assert resp.status_code == 200
        data = resp.json()
        assert data["journalEntryId"] == "entry0000002"
        assert data["userConfirmed"] is False
        assert data["lifeAreas"][0]["area"] == "career"

    async def test_get_analysis_missing(self, auth_client):
        resp = await auth_client.get("/journal/entries/entry0000001/analysis")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Analysis not found"

    async def test_confirm_analysis(self, auth_client, mock_db):
        resp = await auth_client.put("/journal/entries/entry0000002/analysis", json={
            "sentiment": {"overall": "neutral", "confidence": 0.5},
            "people": [],
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["userConfirmed"] is True
        assert data["sentiment"]["overall"] == "neutral"
        assert len([d for d in mock_db.analysis_results._data if d["journal_entry_id"] == "entry0000002"]) == 1

        entry = await mock_db.journal_entries.find_one({"id": "entry0000002"})
        assert entry["user_confirmed_analysis"] is True


class TestAnalyze:
    """analyze pipeline endpoint"""

    async def test_analyze_requires_entry_id(self, auth_client):
        resp = await auth_client.post("/journal/analyze", json={})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Entry ID is required"

    async def test_analyze_unknown_entry(self, auth_client, mock_db):
        with patch(EXTRACT, new_callable=AsyncMock) as mock_extract:
            resp = await auth_client.post("/journal/analyze", json={"entryId": "entry0000404"})
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Entry not found"
        mock_extract.assert_not_called()
        assert mock_db.analysis_results.inserted == []

    async def test_analyze_other_users_entry(self, auth_client):
        resp = await auth_client.post("/journal/analyze", json={"entryId": "entry0000099"})
        assert resp.status_code == 403

    async def test_transcribe_only(self, auth_client, mock_db):
        with patch(EXTRACT, new_callable=AsyncMock) as mock_extract:
            resp = await auth_client.post("/journal/analyze", json={
                "entryId": "entry0000001",
                "processingType": "transcribe-only",
            })
        assert resp.status_code == 200
        assert resp.json()["status"] == "transcribed"
        mock_extract.assert_not_called()

        entry = await mock_db.journal_entries.find_one({"id": "entry0000001"})
        assert entry["processing_status"] == "transcribed"
        assert entry["processing_type"] == "transcribe-only"
        assert entry["processing_history"][-1]["step"] == "transcription"
        assert entry["processing_history"][-1]["status"] == "completed"

    async def test_full_analysis(self, auth_client, mock_db):
        with patch(EXTRACT, new_callable=AsyncMock, return_value=_analysis()) as mock_extract:
            resp = await auth_client.post("/journal/analyze", json={"entryId": "entry0000001"})

        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "completed"
        assert data["message"] == "Analysis completed successfully"
        assert data["analysisId"]
        assert data["analysis"]["sentiment"]["overall"] == "positive"

        args, kwargs = mock_extract.call_args
        assert "Maria" in args[0]
        assert kwargs["priorities"] == ["career", "health", "relationships"]

        entry = await mock_db.journal_entries.find_one({"id": "entry0000001"})
        assert entry["processing_status"] == "completed"
        assert entry["processing_history"][-1]["step"] == "analysis"
        stored = await mock_db.analysis_results.find_one({"journal_entry_id": "entry0000001"})
        assert stored["id"] == data["analysisId"]

    async def test_full_analysis_persists_entities(self, auth_client, mock_db):
        with patch(EXTRACT, new_callable=AsyncMock, return_value=_analysis()):
            await auth_client.post("/journal/analyze", json={"entryId": "entry0000001"})

        # existing person matched case-insensitively
        maria = await mock_db.people.find_one({"id": "person000001"})
        assert maria["frequency"] == 3
        assert maria["journal_mentions"][-1]["journal_id"] == "entry0000001"

        # only the cue with an amount becomes a finance entry
        assert len(mock_db.finance_entries.inserted) == 1
        assert mock_db.finance_entries.inserted[0]["source"] == "journal"
        assert mock_db.tasks.inserted[0]["title"] == "Finish the project report"

    async def test_analysis_gets_personality_context(self, auth_client):
        with patch(EXTRACT, new_callable=AsyncMock, return_value=_analysis()) as mock_extract:
            await auth_client.post("/journal/analyze", json={"entryId": "entry0000001"})
        _, kwargs = mock_extract.call_args
        assert mock_extract.call_count == 1
        assert kwargs["soul_matrix"]["id"] == "soul00000001"
        # no check-in was logged today
        assert kwargs["check_ins"] == []

    async def test_every_extraction_failed(self, auth_client, mock_db):
        with patch(EXTRACT, new_callable=AsyncMock, return_value=AnalysisResult()):
            resp = await auth_client.post("/journal/analyze", json={"entryId": "entry0000001"})

        assert resp.status_code == 502
        entry = await mock_db.journal_entries.find_one({"id": "entry0000001"})
        assert entry["processing_status"] == "draft"
        assert entry["processing_history"][-1]["status"] == "failed"
        assert await mock_db.analysis_results.find_one({"journal_entry_id": "entry0000001"}) is None

    async def test_empty_entry_fails(self, auth_client, mock_db):
        await mock_db.journal_entries.update_one({"id": "entry0000001"}, {"$set": {"content": "  "}})
        with patch(EXTRACT, new_callable=AsyncMock) as mock_extract:
            resp = await auth_client.post("/journal/analyze", json={"entryId": "entry0000001"})
        assert resp.status_code == 502
        mock_extract.assert_not_called()
