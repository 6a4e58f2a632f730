# shared fixtures for backend api tests
# provides mock db, test users, sample records, auth tokens, and httpx test clients

import copy
import re

import pytest
import pytest_asyncio
from unittest.mock import MagicMock
from datetime import datetime, timezone, timedelta
from bson import ObjectId

from httpx import AsyncClient, ASGITransport

from journaling_app.main import app
from journaling_app.services.db import get_db
from journaling_app.services.auth_service import hash_password, create_access_token
from journaling_app.dependencies import get_current_user


# test ids
USER_ID = "a1b2c3d4e5f6"
OTHER_USER_ID = "f6e5d4c3b2a1"

NOW = datetime.now(timezone.utc)


def ago(days=0, hours=0):
    """iso timestamp relative to test start"""
    return (NOW - timedelta(days=days, hours=hours)).isoformat()


# test user documents (as they'd appear from mongodb)

USER_DOC = {
    "_id": ObjectId(),
    "id": USER_ID,
    "email": "sam.taylor@email.com",
    "hashed_password": hash_password("journal123"),
    "name": "Sam Taylor",
    "avatar_url": None,
    "settings": {"theme": "dark", "notifications": True, "autoSave": True, "processingType": "full-analysis"},
    "created_at": "2025-06-01T00:00:00+00:00",
    "updated_at": "2025-06-01T00:00:00+00:00",
}

OTHER_USER_DOC = {
    "_id": ObjectId(),
    "id": OTHER_USER_ID,
    "email": "jordan.kim@email.com",
    "hashed_password": hash_password("journal123"),
    "name": "Jordan Kim",
    "avatar_url": None,
    "settings": {},
    "created_at": "2025-05-15T00:00:00+00:00",
    "updated_at": "2025-05-15T00:00:00+00:00",
}


# sample data

SAMPLE_ENTRY = {
    "_id": ObjectId(),
    "id": "entry0000001",
    "user_id": USER_ID,
    "content": "Had a great lunch with Maria near the office. Spent $25 on food. "
               "Need to finish the project report by Friday.",
    "audio_url": None,
    "transcription": None,
    "entry_type": "text",
    "processing_type": "full-analysis",
    "processing_status": "draft",
    "tags": ["work"],
    "mood": "🙂",
    "user_confirmed_transcription": False,
    "user_confirmed_analysis": False,
    "processing_history": [],
    "created_at": ago(days=1),
    "updated_at": ago(days=1),
}

SAMPLE_ENTRY_2 = {
    "_id": ObjectId(),
    "id": "entry0000002",
    "user_id": USER_ID,
    "content": "Feeling stressed and tired after work. My boss moved the deadline again and I am worried.",
    "audio_url": None,
    "transcription": None,
    "entry_type": "text",
    "processing_type": "full-analysis",
    "processing_status": "completed",
    "tags": [],
    "mood": "😞",
    "user_confirmed_transcription": False,
    "user_confirmed_analysis": False,
    "processing_history": [],
    "created_at": ago(days=3),
    "updated_at": ago(days=3),
}

OTHER_ENTRY = {
    "_id": ObjectId(),
    "id": "entry0000099",
    "user_id": OTHER_USER_ID,
    "content": "Someone else's private thoughts.",
    "entry_type": "text",
    "processing_type": "full-analysis",
    "processing_status": "draft",
    "tags": [],
    "created_at": ago(days=2),
    "updated_at": ago(days=2),
}

SAMPLE_ANALYSIS = {
    "_id": ObjectId(),
    "id": "analysis0001",
    "journal_entry_id": "entry0000002",
    "user_id": USER_ID,
    "sentiment": {"overall": "negative", "score": -0.6, "emotions": ["stress", "worry"], "confidence": 0.8},
    "people": [{"name": "Boss", "relationship": "colleague", "context": "moved the deadline", "sentiment": "negative"}],
    "finance": [],
    "tasks": [],
    "locations": [],
    "temporal": [],
    "life_areas": [{"area": "career", "relevance": 0.9, "sentiment": "negative", "context": "deadline pressure"}],
    "insights": None,
    "user_confirmed": False,
    "created_at": ago(days=3),
    "updated_at": ago(days=3),
}

SAMPLE_CHECK_IN = {
    "_id": ObjectId(),
    "id": "checkin00001",
    "user_id": USER_ID,
    "mood": "😊",
    "energy": 8,
    "movement": 6,
    "sleep_hours": 7,
    "sleep_minutes": 30,
    "note": "Good start",
    "created_at": ago(days=1, hours=1),
    "updated_at": ago(days=1, hours=1),
}

SAMPLE_CHECK_IN_2 = {
    "_id": ObjectId(),
    "id": "checkin00002",
    "user_id": USER_ID,
    "mood": "😞",
    "energy": 3,
    "movement": 2,
    "sleep_hours": 5,
    "sleep_minutes": 0,
    "note": None,
    "created_at": ago(days=3, hours=1),
    "updated_at": ago(days=3, hours=1),
}

OTHER_CHECK_IN = {
    "_id": ObjectId(),
    "id": "checkin00099",
    "user_id": OTHER_USER_ID,
    "mood": "😢",
    "energy": 1,
    "movement": 1,
    "sleep_hours": 3,
    "sleep_minutes": 0,
    "created_at": ago(days=1),
}

SAMPLE_PERSON = {
    "_id": ObjectId(),
    "id": "person000001",
    "user_id": USER_ID,
    "name": "Maria",
    "relationship": "friend",
    "display_picture": None,
    "context": "college friend",
    "sentiment": "positive",
    "frequency": 2,
    "last_mentioned": ago(days=1),
    "journal_mentions": [
        {"journal_id": "entry0000001", "timestamp": ago(days=1), "context": "lunch", "sentiment": "positive"},
    ],
    "created_at": ago(days=20),
    "updated_at": ago(days=1),
}

OTHER_PERSON = {
    "_id": ObjectId(),
    "id": "person000099",
    "user_id": OTHER_USER_ID,
    "name": "Chris",
    "relationship": "brother",
    "frequency": 1,
    "journal_mentions": [],
    "created_at": ago(days=5),
}

SAMPLE_FINANCE = {
    "_id": ObjectId(),
    "id": "finance00001",
    "user_id": USER_ID,
    "amount": 25.0,
    "currency": "USD",
    "category": "expense",
    "subcategory": "food",
    "description": "Lunch with Maria",
    "date": ago(days=1)[:10],
    "recurring": False,
    "recurring_pattern": None,
    "priority": "low",
    "tags": ["food"],
    "notes": None,
    "source": "journal",
    "journal_entry_id": "entry0000001",
    "created_at": ago(days=1),
    "updated_at": ago(days=1),
}

SAMPLE_INCOME = {
    "_id": ObjectId(),
    "id": "finance00002",
    "user_id": USER_ID,
    "amount": 3000.0,
    "currency": "USD",
    "category": "income",
    "description": "Salary",
    "date": ago(days=10)[:10],
    "recurring": True,
    "recurring_pattern": "monthly",
    "priority": "high",
    "tags": [],
    "source": "manual",
    "journal_entry_id": None,
    "created_at": ago(days=10),
    "updated_at": ago(days=10),
}

SAMPLE_TASK = {
    "_id": ObjectId(),
    "id": "task00000001",
    "user_id": USER_ID,
    "title": "Finish the project report",
    "description": "Finish the project report",
    "status": "pending",
    "priority": "high",
    "start_date": ago(days=1)[:10],
    "deadline": ago(days=1)[:10],
    "category": "work",
    "is_completed": False,
    "completed_date": None,
    "source": "journal",
    "journal_entry_id": "entry0000001",
    "created_at": ago(days=1),
    "updated_at": ago(days=1),
}

SAMPLE_TASK_DONE = {
    "_id": ObjectId(),
    "id": "task00000002",
    "user_id": USER_ID,
    "title": "Book dentist appointment",
    "status": "completed",
    "priority": "medium",
    "is_completed": True,
    "completed_date": ago(days=2)[:10],
    "source": "manual",
    "journal_entry_id": None,
    "created_at": ago(days=4),
    "updated_at": ago(days=2),
}

SAMPLE_GOAL = {
    "_id": ObjectId(),
    "id": "goal00000001",
    "user_id": USER_ID,
    "title": "Run a 10k",
    "description": "Build up to a 10k run",
    "target_date": ago(days=5)[:10],
    "life_area_id": "health",
    "priority": "high",
    "category": "fitness",
    "status": "in-progress",
    "progress": 40,
    "created_at": ago(days=30),
    "updated_at": ago(days=6),
}

SAMPLE_WHEEL = {
    "_id": ObjectId(),
    "id": "wheel0000001",
    "user_id": USER_ID,
    "life_areas": [
        {"id": "career", "name": "Career & Work", "description": "Job satisfaction, professional growth",
         "current_score": 4, "target_score": 8, "color": "#3B82F6", "icon": "💼"},
        {"id": "health", "name": "Health & Fitness", "description": "Physical health, exercise, nutrition",
         "current_score": 7, "target_score": 9, "color": "#EF4444", "icon": "🏃‍♂️"},
        {"id": "relationships", "name": "Relationships", "description": "Family, friends, romantic relationships",
         "current_score": 8, "target_score": 9, "color": "#F59E0B", "icon": "❤️"},
    ],
    "priorities": ["career", "health", "relationships"],
    "is_completed": True,
    "created_at": ago(days=30),
    "updated_at": ago(days=30),
}

SAMPLE_SOUL_MATRIX = {
    "_id": ObjectId(),
    "id": "soul00000001",
    "user_id": USER_ID,
    "traits": {
        "openness": {"score": 0.7, "confidence": 0.6, "description": "curious", "trend": "stable"},
        "conscientiousness": {"score": 0.6, "confidence": 0.6, "description": "organized", "trend": "stable"},
        "extraversion": {"score": 0.3, "confidence": 0.5, "description": "reserved", "trend": "stable"},
        "agreeableness": {"score": 0.6, "confidence": 0.5, "description": "warm", "trend": "stable"},
        "neuroticism": {"score": 0.8, "confidence": 0.5, "description": "often stressed", "trend": "increasing"},
    },
    "evolution": [],
    "confidence": 0.55,
    "analyzed_entries": ["entry0000002"],
    "last_updated": ago(days=3),
    "next_update": ago(days=2),
    "created_at": ago(days=3),
    "updated_at": ago(days=3),
}

SAMPLE_RECAP = {
    "_id": ObjectId(),
    "id": "recap0000001",
    "user_id": USER_ID,
    "type": "weekly",
    "period_start": ago(days=14),
    "period_end": ago(days=7),
    "content": {"title": "A busy week", "narrative": "Work dominated.", "highlights": ["Lunch with Maria"],
                "challenges": [], "achievements": []},
    "insights": {"emotionalTrends": "Mostly calm"},
    "recommendations": {"immediateActions": ["Sleep earlier"]},
    "life_area_improvements": [],
    "metrics": {"entries_count": 2, "mood_average": 6.0, "energy_average": 5.5, "people_interacted": 1,
                "tasks_completed": 1, "financial_insights_count": 1},
    "generated_at": ago(days=7),
    "viewed_at": None,
    "created_at": ago(days=7),
}

OTHER_RECAP = {
    "_id": ObjectId(),
    "id": "recap0000099",
    "user_id": OTHER_USER_ID,
    "type": "monthly",
    "period_start": ago(days=30),
    "period_end": ago(days=0),
    "content": {},
    "insights": {},
    "recommendations": {},
    "metrics": {},
    "generated_at": ago(days=0),
    "created_at": ago(days=0),
}


# async cursor mock

class AsyncCursorMock:
    """mock for motor's async cursor — supports async for and chained methods"""

    def __init__(self, data=None):
        self._data = list(data or [])
        self._index = 0

    def sort(self, key, direction=1):
        if isinstance(key, list):
            for k, d in reversed(key):
                self.sort(k, d)
            return self
        # missing values sort first ascending, like mongodb nulls
        self._data.sort(key=lambda d: (d.get(key) is not None, str(d.get(key) or "")), reverse=direction == -1)
        return self

    def skip(self, n):
        self._data = self._data[n:]
        return self

    def limit(self, n):
        if n:
            self._data = self._data[:n]
        return self

    def __aiter__(self):
        self._index = 0
        return self

    async def __anext__(self):
        if self._index >= len(self._data):
            raise StopAsyncIteration
        item = self._data[self._index]
        self._index += 1
        return item

    async def to_list(self, length=None):
        if length is not None:
            return self._data[:length]
        return self._data


class MockCollection:
    """mock for a motor collection with async methods"""

    def __init__(self, data=None):
        self._data = data or []
        self.inserted = []

    def find(self, query=None, projection=None):
        results = self._data
        if query:
            results = [d for d in results if self._matches(d, query)]
        return AsyncCursorMock(results)

    async def find_one(self, query=None, projection=None):
        if not query:
            return self._data[0] if self._data else None
        for doc in self._data:
            if self._matches(doc, query):
                return doc
        return None

    async def insert_one(self, doc):
        oid = doc.get("_id", ObjectId())
        doc["_id"] = oid
        self._data.append(doc)
        self.inserted.append(doc)
        result = MagicMock()
        result.inserted_id = oid
        return result

    async def count_documents(self, query=None):
        if not query:
            return len(self._data)
        return len([d for d in self._data if self._matches(d, query)])

    def _apply(self, doc, update):
        if "$set" in update:
            doc.update(update["$set"])
        if "$inc" in update:
            for key, val in update["$inc"].items():
                doc[key] = (doc.get(key) or 0) + val
        if "$push" in update:
            for key, val in update["$push"].items():
                doc.setdefault(key, [])
                doc[key] = list(doc[key]) + [val]
        if "$addToSet" in update:
            for key, val in update["$addToSet"].items():
                doc.setdefault(key, [])
                if val not in doc[key]:
                    doc[key].append(val)

    async def update_one(self, query, update, upsert=False):
        result = MagicMock()
        result.modified_count = 0
        result.upserted_id = None
        for doc in self._data:
            if self._matches(doc, query):
                self._apply(doc, update)
                result.modified_count = 1
                return result
        if upsert:
            doc = {k: v for k, v in query.items() if not isinstance(v, dict)}
            self._apply(doc, update)
            await self.insert_one(doc)
            result.upserted_id = doc["_id"]
        return result

    async def update_many(self, query, update):
        result = MagicMock()
        result.modified_count = 0
        for doc in self._data:
            if self._matches(doc, query):
                self._apply(doc, update)
                result.modified_count += 1
        return result

    async def delete_one(self, query):
        result = MagicMock()
        result.deleted_count = 0
        for i, doc in enumerate(self._data):
            if self._matches(doc, query):
                del self._data[i]
                result.deleted_count = 1
                break
        return result

    async def delete_many(self, query):
        result = MagicMock()
        before = len(self._data)
        self._data[:] = [d for d in self._data if not self._matches(d, query)]
        result.deleted_count = before - len(self._data)
        return result

    async def create_index(self, *args, **kwargs):
        return "mock_index"

    def _matches(self, doc, query):
        """basic mongodb query matching for tests"""
        for key, value in query.items():
            if key == "$or":
                if not any(self._matches(doc, cond) for cond in value):
                    return False
                continue
            doc_val = doc.get(key)
            if isinstance(value, dict):
                if "$in" in value:
                    if doc_val not in value["$in"]:
                        return False
                elif "$gte" in value:
                    if doc_val is None or doc_val < value["$gte"]:
                        return False
                elif "$regex" in value:
                    flags = re.IGNORECASE if value.get("$options") == "i" else 0
                    if doc_val is None or not re.search(value["$regex"], str(doc_val), flags):
                        return False
            elif doc_val != value:
                return False
        return True


class MockDatabase:
    """mock database that mimics the Database class"""

    def __init__(self):
        def fresh(*docs):
            return MockCollection([copy.deepcopy(d) for d in docs])

        self.users = fresh(USER_DOC, OTHER_USER_DOC)
        self.journal_entries = fresh(SAMPLE_ENTRY, SAMPLE_ENTRY_2, OTHER_ENTRY)
        self.analysis_results = fresh(SAMPLE_ANALYSIS)
        self.check_ins = fresh(SAMPLE_CHECK_IN, SAMPLE_CHECK_IN_2, OTHER_CHECK_IN)
        self.people = fresh(SAMPLE_PERSON, OTHER_PERSON)
        self.finance_entries = fresh(SAMPLE_FINANCE, SAMPLE_INCOME)
        self.tasks = fresh(SAMPLE_TASK, SAMPLE_TASK_DONE)
        self.goals = fresh(SAMPLE_GOAL)
        self.soul_matrix = fresh(SAMPLE_SOUL_MATRIX)
        self.wheel_of_life = fresh(SAMPLE_WHEEL)
        self.recaps = fresh(SAMPLE_RECAP, OTHER_RECAP)
        self.nudge_interactions = fresh()

    async def connect(self):
        pass

    async def close(self):
        pass


@pytest.fixture
def mock_db():
    """create a fresh mock database for each test"""
    return MockDatabase()


def _user_dict():
    """return user dict as get_current_user would return"""
    doc = copy.deepcopy(USER_DOC)
    doc.pop("_id", None)
    return doc


@pytest.fixture
def user_token():
    """jwt access token for the test user"""
    return create_access_token({"sub": USER_ID, "email": USER_DOC["email"]})


@pytest_asyncio.fixture
async def client(mock_db):
    """httpx async test client with mocked db, no auth override"""

    async def override_get_db():
        return mock_db

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def auth_client(mock_db):
    """client authenticated as the test user"""

    async def override_get_db():
        return mock_db

    async def override_get_current_user():
        return _user_dict()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
