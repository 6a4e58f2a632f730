# tests for recap cards — card builders and GET /recaps/cards

import pytest
from datetime import timedelta

from tests.conftest import USER_ID, NOW, ago
from journaling_app.services import recap_cards

CARD_COLLECTIONS = ("journal_entries", "check_ins", "people", "finance_entries", "tasks", "goals")


def _entry(content, days=0, hours=1, entry_id="entry0000050"):
    return {"id": entry_id, "user_id": USER_ID, "content": content, "created_at": ago(days=days, hours=hours)}


class TestHelpers:
    """trend, active day, mindset"""

    def test_mood_trend(self):
        assert recap_cards.mood_trend([5]) == "stable"
        assert recap_cards.mood_trend([5, 5, 5, 5]) == "stable"
        assert recap_cards.mood_trend([3, 9]) == "improving"
        assert recap_cards.mood_trend([8, 8, 4, 4]) == "declining"
        # within 10% either way
        assert recap_cards.mood_trend([10, 10.5]) == "stable"

    def test_most_active_day(self):
        assert recap_cards.most_active_day([]) == "No data"
        records = [
            {"created_at": "2025-06-02T09:00:00+00:00"},
            {"created_at": "2025-06-03T09:00:00+00:00"},
            {"created_at": "2025-06-03T18:00:00+00:00"},
        ]
        assert recap_cards.most_active_day(records) == "2025-06-03"

    def test_growth_mindset(self):
        assert recap_cards.growth_mindset([]) == "Developing"
        entries = [{"content": "I want to learn and grow"}] * 3
        assert recap_cards.growth_mindset(entries) == "Moderate"
        assert recap_cards.growth_mindset(entries * 2) == "Strong"


class TestCardBuilders:
    """each card over hand-made records"""

    def test_people_card_new_people_only(self):
        people = [{"id": "p1", "name": "Zoe", "created_at": ago(days=1)}]
        card = recap_cards.people_card(people, [], NOW - timedelta(days=7), NOW)
        assert card.title == "Your social connections"
        assert card.insights == ["You added 1 new person to your network"]
        assert card.highlights == ["New connection: Zoe"]

    def test_people_card_nothing_to_show(self):
        people = [{"id": "p1", "name": "Zoe", "created_at": ago(days=30)}]
        assert recap_cards.people_card(people, [{"content": "quiet week"}], NOW - timedelta(days=7), NOW) is None
        assert recap_cards.people_card([], [], NOW - timedelta(days=7), NOW) is None

    def test_places_card_routine(self):
        entries = [{"content": f"Went to the gym again, day {i}", "created_at": ago(days=i)} for i in range(4)]
        entries.append({"content": "Quiet evening at home", "created_at": ago(days=5)})
        card = recap_cards.places_card(entries)
        assert card.title == "You visited gym the most"
        assert card.data["places"] == [{"name": "gym", "count": 4}, {"name": "home", "count": 1}]
        assert "regular part of your routine" in card.content

    def test_places_card_none(self):
        assert recap_cards.places_card([{"content": "Read a book"}]) is None

    def test_finance_card_savings(self):
        entries = [
            {"id": "f1", "category": "income", "amount": 1000},
            {"id": "f2", "category": "expense", "amount": 100, "description": "Groceries"},
            {"id": "f3", "category": "expense", "amount": 300, "description": "Rent share"},
        ]
        card = recap_cards.finance_card(entries)
        assert card.title == "You saved $600.00 this week"
        assert "excellent savings rate of 60.0%" in card.content
        assert "Savings rate: 60.0%" in card.insights
        assert card.highlights[1] == "Biggest expense: Rent share ($300.00)"
        assert card.data["topExpense"]["id"] == "f3"

    def test_finance_card_empty(self):
        assert recap_cards.finance_card([]) is None

    def test_goals_card_rates(self):
        tasks = [{"status": "completed", "created_at": ago(days=1)}] * 4 + [{"status": "pending", "created_at": ago(days=2)}]
        goals = [{"status": "completed"}]
        card = recap_cards.goals_card(goals, tasks)
        assert card.title == "You completed 4 tasks and 1 goal"
        assert "excellent task completion rate of 80.0%" in card.content
        assert card.data["goalCompletionRate"] == 100.0

    def test_goals_card_empty(self):
        assert recap_cards.goals_card([], []) is None


class TestRecapCardsEndpoint:
    """GET /recaps/cards"""

    async def test_default_week(self, auth_client):
        resp = await auth_client.get("/recaps/cards")
        assert resp.status_code == 200
        cards = {c["category"]: c for c in resp.json()}
        assert [c["category"] for c in resp.json()] == ["people", "mood", "places", "goals", "finance"]

        assert cards["people"]["title"] == "You talked about Maria the most"
        assert cards["people"]["highlights"][0] == "Maria was mentioned 1 time"

        mood = cards["mood"]
        assert mood["insights"][0] == "Your average mood was 6.0/10 this week"
        assert mood["highlights"] == ["Best mood: 9/10", "Mood trend: improving", "Most frequent mood: 😞"]
        assert mood["data"]["avgMood"] == 6.0

        assert cards["places"]["title"] == "You visited work the most"
        assert cards["places"]["data"]["totalPlaces"] == 2

        goals = cards["goals"]
        assert goals["title"] == "You completed 1 task and 0 goals"
        assert goals["insights"] == [
            "Task completion rate: 50.0%", "Goal completion rate: 0.0%", "You made progress on 3 items this week",
        ]

        # the salary is dated ten days back
        finance = cards["finance"]
        assert finance["title"] == "You spent $25.00 more than you earned"
        assert finance["data"]["totalEntries"] == 1

    async def test_growth_card(self, auth_client, mock_db):
        await mock_db.journal_entries.insert_one(_entry("I learned to slow down and the week got better."))
        resp = await auth_client.get("/recaps/cards")
        cards = resp.json()
        assert [c["category"] for c in cards] == ["people", "mood", "places", "growth", "goals", "finance"]
        growth = cards[3]
        assert growth["title"] == "You grew in 2 different ways this week"
        assert growth["highlights"][0].startswith("Learned: I learned to slow down")
        assert growth["highlights"][-1] == "Growth mindset: Developing"
        assert growth["data"]["learningMoments"] == ["entry0000050"]

    async def test_new_person(self, auth_client, mock_db):
        await mock_db.people.insert_one({
            "id": "person000002", "user_id": USER_ID, "name": "Priya", "relationship": "colleague",
            "created_at": ago(days=1),
        })
        resp = await auth_client.get("/recaps/cards")
        people = resp.json()[0]
        assert people["title"] == "You talked about Maria the most"
        assert people["insights"][0] == "You added 1 new person to your network"
        assert "New connection: Priya" in people["highlights"]
        assert people["data"]["newPeople"] == [{"id": "person000002", "name": "Priya"}]

    async def test_shorter_window(self, auth_client):
        resp = await auth_client.get("/recaps/cards?days=2")
        cards = {c["category"]: c for c in resp.json()}
        assert cards["mood"]["highlights"][1] == "Mood trend: stable"
        assert cards["mood"]["insights"][-1] == "You completed 1 mood check-in"
        assert cards["places"]["title"] == "You visited office the most"
        assert cards["goals"]["title"] == "You completed 0 tasks and 0 goals"

    async def test_no_records(self, auth_client, mock_db):
        for name in CARD_COLLECTIONS:
            getattr(mock_db, name)._data.clear()
        resp = await auth_client.get("/recaps/cards")
        assert resp.status_code == 200
        assert resp.json() == []

    async def test_cards_not_stored(self, auth_client, mock_db):
        await auth_client.get("/recaps/cards")
        assert mock_db.recaps.inserted == []

    async def test_invalid_days(self, auth_client):
        resp = await auth_client.get("/recaps/cards?days=0")
        assert resp.status_code == 422

    async def test_no_auth(self, client):
        resp = await client.get("/recaps/cards")
        assert resp.status_code in (401, 403)
