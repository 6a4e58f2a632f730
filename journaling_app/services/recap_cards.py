# recap cards — short rule-written story cards over the last few days of records
# no llm involved; every number is counted from the stored documents.
# a card is only built when its category has something to show.

import logging
from collections import Counter
from datetime import datetime
from typing import Any, Optional

from journaling_app.models.wellbeing import RecapCard
from journaling_app.services.insights_service import entry_text, get_mood_score
from journaling_app.services.records import parse_datetime

logger = logging.getLogger(__name__)

PLACE_KEYWORDS = ("home", "work", "office", "gym", "store", "restaurant", "cafe", "park", "school", "hospital")
LEARNING_KEYWORDS = ("learn", "learned", "discovered", "realized", "understood", "figured out")
CHALLENGE_KEYWORDS = ("challenge", "overcame", "difficult", "struggled", "managed", "solved")
GROWTH_KEYWORDS = ("grow", "growth", "improve", "develop", "progress", "better")
MINDSET_KEYWORDS = ("learn", "grow", "improve", "develop", "progress")

# collections a card set is built from
CARD_SOURCES = ("journal_entries", "check_ins", "people", "finance_entries", "tasks", "goals")


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" + ("" if count == 1 else "s")


def _within(value: Any, start: datetime, end: datetime) -> bool:
    when = parse_datetime(value)
    return when is not None and start <= when <= end


def _on_days(value: Any, start: datetime, end: datetime) -> bool:
    # finance dates are bare days
    when = parse_datetime(value)
    return when is not None and start.date() <= when.date() <= end.date()


def _day(record: dict) -> str:
    return (record.get("created_at") or "")[:10]


def _matching(entries: list[dict], keywords: tuple) -> list[dict]:
    return [e for e in entries if any(k in entry_text(e).lower() for k in keywords)]


def most_active_day(records: list[dict]) -> str:
    """the creation day seen most often; the earliest-seen day wins a tie"""
    days = Counter(_day(r) for r in records if _day(r))
    return days.most_common(1)[0][0] if days else "No data"


def mood_trend(scores: list[float]) -> str:
    """second half vs first half: more than 10% up is improving, 10% down declining"""
    if len(scores) < 2:
        return "stable"
    half = len(scores) // 2
    first = sum(scores[:half]) / half
    second = sum(scores[half:]) / (len(scores) - half)
    if second > first * 1.1:
        return "improving"
    if second < first * 0.9:
        return "declining"
    return "stable"


def growth_mindset(entries: list[dict]) -> str:
    mentions = len(_matching(entries, MINDSET_KEYWORDS))
    if mentions > 5:
        return "Strong"
    if mentions > 2:
        return "Moderate"
    return "Developing"


def people_card(people: list[dict], entries: list[dict], start: datetime, end: datetime) -> Optional[RecapCard]:
    if not people:
        return None

    mentions = []
    for person in people:
        name = (person.get("name") or "").lower()
        count = sum(1 for e in entries if name and name in entry_text(e).lower())
        if count:
            mentions.append({"id": person.get("id"), "name": person.get("name"), "mentions": count})
    mentions.sort(key=lambda m: m["mentions"], reverse=True)
    new_people = [
        {"id": p.get("id"), "name": p.get("name")} for p in people if _within(p.get("created_at"), start, end)
    ]
    if not mentions and not new_people:
        return None

    top = mentions[0] if mentions else None
    total = sum(m["mentions"] for m in mentions)
    added = f"{len(new_people)} new {'person' if len(new_people) == 1 else 'people'}"

    content = []
    if top:
        content.append(f"This week, you talked about {top['name']} the most in your journal entries.")
    if new_people:
        content.append(f"You also added {added} to your network.")
    content.append(f"In total, you made {_plural(total, 'mention')} across {_plural(len(mentions), 'connection')}.")
    if len(mentions) > 3:
        content.append("You're maintaining a diverse social network!")
    elif mentions:
        content.append("You're building meaningful relationships.")

    insights = []
    if new_people:
        insights.append(f"You added {added} to your network")
    if total:
        insights.append(f"People came up {_plural(total, 'time')} in your journal entries")
    if len(mentions) > 1:
        insights.append(f"You interacted with {len(mentions)} different people this week")

    highlights = []
    if top:
        highlights.append(f"{top['name']} was mentioned {_plural(top['mentions'], 'time')}")
    if new_people:
        highlights.append(f"New connection: {new_people[0]['name']}")
    if mentions:
        highlights.append(f"Most active day for social interactions: {most_active_day(entries)}")

    return RecapCard(
        id="people-card",
        category="people",
        title=f"You talked about {top['name']} the most" if top else "Your social connections",
        subtitle="People & Relationships",
        content=" ".join(content),
        insights=insights,
        highlights=highlights,
        data={"peopleMentions": mentions, "newPeople": new_people, "totalMentions": total},
    )


def mood_card(check_ins: list[dict]) -> Optional[RecapCard]:
    if not check_ins:
        return None

    ordered = sorted(check_ins, key=lambda c: c.get("created_at") or "")
    scores = [get_mood_score(c.get("mood")) for c in ordered]
    average = sum(scores) / len(scores)
    best, worst = max(scores), min(scores)
    best_day = ordered[scores.index(best)]
    worst_day = ordered[scores.index(worst)]
    trend = mood_trend(scores)
    dominant = Counter(c.get("mood") or "unknown" for c in ordered).most_common(1)[0][0]

    if average >= 7:
        content = f"You had a great week emotionally! Your average mood was {average:.1f}/10."
    elif average >= 5:
        content = f"You had a balanced week with an average mood of {average:.1f}/10."
    else:
        content = f"You had some challenging moments this week, with an average mood of {average:.1f}/10."
    content += f" Your best day was {_day(best_day)} when you felt {best_day.get('mood')}."
    if trend == "improving":
        content += " Your mood trended upward throughout the week!"
    elif trend == "declining":
        content += " You faced some emotional challenges this week."
    else:
        content += " Your mood remained relatively stable."

    return RecapCard(
        id="mood-card",
        category="mood",
        title=f"Your mood was mostly {dominant} this week",
        subtitle="Emotional Journey",
        content=content,
        insights=[
            f"Your average mood was {average:.1f}/10 this week",
            f"You felt your best on {_day(best_day)}",
            f"You had a challenging day on {_day(worst_day)}",
            f"You completed {_plural(len(ordered), 'mood check-in')}",
        ],
        highlights=[
            f"Best mood: {best:g}/10",
            f"Mood trend: {trend}",
            f"Most frequent mood: {dominant}",
        ],
        data={
            "moodScores": [{"date": _day(c), "mood": c.get("mood"), "score": s} for c, s in zip(ordered, scores)],
            "avgMood": round(average, 1),
            "dominantMood": dominant,
            "moodTrend": trend,
        },
    )


def places_card(entries: list[dict]) -> Optional[RecapCard]:
    counts = [(place, len(_matching(entries, (place,)))) for place in PLACE_KEYWORDS]
    places = sorted(
        ({"name": place, "count": n} for place, n in counts if n), key=lambda p: p["count"], reverse=True,
    )
    if not places:
        return None

    top = places[0]
    active = most_active_day(entries)
    content = f"This week, you visited {top['name']} the most ({_plural(top['count'], 'time')})."
    if len(places) > 3:
        content += f" You were quite active, visiting {len(places)} different places."
    elif len(places) > 1:
        content += f" You visited {len(places)} different places this week."
    if top["count"] > 3:
        content += f" It seems like {top['name']} is becoming a regular part of your routine!"
    else:
        content += " You're exploring different places and activities."

    return RecapCard(
        id="places-card",
        category="places",
        title=f"You visited {top['name']} the most",
        subtitle="Places & Activities",
        content=content,
        insights=[
            f"You mentioned {_plural(len(places), 'different place')} this week",
            f"Your most frequent location was {top['name']} ({_plural(top['count'], 'time')})",
            f"You were most active on {active}",
        ],
        highlights=[
            f"Favorite place: {top['name']}",
            f"Total places visited: {len(places)}",
            f"Most active day: {active}",
        ],
        data={"places": places, "mostFrequentPlace": top, "totalPlaces": len(places)},
    )


def growth_card(entries: list[dict]) -> Optional[RecapCard]:
    learning = _matching(entries, LEARNING_KEYWORDS)
    challenges = _matching(entries, CHALLENGE_KEYWORDS)
    growth = _matching(entries, GROWTH_KEYWORDS)
    total = len(learning) + len(challenges) + len(growth)
    if not total:
        return None

    content = []
    if learning:
        content.append(f"You had {_plural(len(learning), 'learning moment')} this week.")
    if challenges:
        content.append(f"You overcame {_plural(len(challenges), 'challenge')}.")
    if growth:
        content.append(f"You used {_plural(len(growth), 'growth-related word')} in your reflections.")
    if total > 5:
        content.append("You're showing excellent personal development this week!")
    elif total > 2:
        content.append("You're making steady progress in your personal growth.")
    else:
        content.append("Every small step counts towards your growth.")

    insights = []
    if learning:
        insights.append(f"You had {_plural(len(learning), 'learning moment')}")
    if challenges:
        insights.append(f"You overcame {_plural(len(challenges), 'challenge')}")
    if growth:
        insights.append(f"You used {_plural(len(growth), 'growth-related word')}")

    highlights = []
    if learning:
        highlights.append(f"Learned: {entry_text(learning[0])[:50]}...")
    if challenges:
        highlights.append(f"Overcame: {entry_text(challenges[0])[:50]}...")
    highlights.append(f"Growth mindset: {growth_mindset(entries)}")

    return RecapCard(
        id="growth-card",
        category="growth",
        title=f"You grew in {total} different ways this week",
        subtitle="Personal Development",
        content=" ".join(content),
        insights=insights,
        highlights=highlights,
        data={
            "learningMoments": [e.get("id") for e in learning],
            "challengesOvercome": [e.get("id") for e in challenges],
            "growthKeywords": [e.get("id") for e in growth],
            "totalGrowth": total,
        },
    )


def goals_card(goals: list[dict], tasks: list[dict]) -> Optional[RecapCard]:
    total_tasks, total_goals = len(tasks), len(goals)
    if not total_tasks and not total_goals:
        return None

    done_tasks = sum(1 for t in tasks if t.get("status") == "completed" or t.get("is_completed"))
    done_goals = sum(1 for g in goals if g.get("status") == "completed")
    task_rate = done_tasks / total_tasks * 100 if total_tasks else 0.0
    goal_rate = done_goals / total_goals * 100 if total_goals else 0.0

    content = []
    if done_tasks:
        content.append(f"You completed {done_tasks} out of {_plural(total_tasks, 'task')} this week.")
    if done_goals:
        content.append(f"You achieved {done_goals} out of {_plural(total_goals, 'goal')}.")
    if task_rate >= 80:
        content.append(f"You had an excellent task completion rate of {task_rate:.1f}%!")
    elif task_rate >= 60:
        content.append(f"You had a good task completion rate of {task_rate:.1f}%.")
    elif total_tasks:
        content.append(f"You completed {task_rate:.1f}% of your tasks.")
    if goal_rate >= 80:
        content.append("You're making excellent progress on your goals!")
    elif goal_rate >= 60:
        content.append("You're making steady progress on your goals.")
    elif total_goals:
        content.append("Keep working towards your goals!")

    insights = []
    if total_tasks:
        insights.append(f"Task completion rate: {task_rate:.1f}%")
    if total_goals:
        insights.append(f"Goal completion rate: {goal_rate:.1f}%")
    insights.append(f"You made progress on {_plural(total_tasks + total_goals, 'item')} this week")

    highlights = []
    if done_tasks:
        highlights.append(f"Completed {_plural(done_tasks, 'task')}")
    if done_goals:
        highlights.append(f"Achieved {_plural(done_goals, 'goal')}")
    highlights.append(f"Most productive day: {most_active_day(tasks)}")

    return RecapCard(
        id="goals-card",
        category="goals",
        title=f"You completed {_plural(done_tasks, 'task')} and {_plural(done_goals, 'goal')}",
        subtitle="Achievements & Progress",
        content=" ".join(content),
        insights=insights,
        highlights=highlights,
        data={
            "completedTasks": done_tasks,
            "totalTasks": total_tasks,
            "completedGoals": done_goals,
            "totalGoals": total_goals,
            "taskCompletionRate": round(task_rate, 1),
            "goalCompletionRate": round(goal_rate, 1),
        },
    )


def finance_card(entries: list[dict]) -> Optional[RecapCard]:
    if not entries:
        return None

    def amount(entry: dict) -> float:
        return float(entry.get("amount") or 0)

    expenses_list = [e for e in entries if e.get("category") == "expense"]
    income = sum(amount(e) for e in entries if e.get("category") == "income")
    expenses = sum(amount(e) for e in expenses_list)
    savings = income - expenses
    rate = savings / income * 100 if income > 0 else 0.0
    top = max(expenses_list, key=amount) if expenses_list else None

    if savings >= 0:
        content = f"Great job! You saved ${savings:.2f} this week."
    else:
        content = f"You spent ${abs(savings):.2f} more than you earned this week."
    if income > 0:
        content += f" Your total income was ${income:.2f}."
    if expenses > 0:
        content += f" Your total expenses were ${expenses:.2f}."
    if rate >= 20:
        content += f" You're maintaining an excellent savings rate of {rate:.1f}%!"
    elif rate >= 10:
        content += f" You're building good savings habits with a {rate:.1f}% savings rate."
    elif rate > 0:
        content += f" You're starting to build your savings with a {rate:.1f}% rate."
    else:
        content += " Consider reviewing your spending patterns."

    insights = [f"Total income: ${income:.2f}", f"Total expenses: ${expenses:.2f}"]
    if rate > 0:
        insights.append(f"Savings rate: {rate:.1f}%")
    insights.append(f"You tracked {len(entries)} financial {'entry' if len(entries) == 1 else 'entries'}")

    highlights = [f"Saved ${savings:.2f}" if savings >= 0 else f"Overspent by ${abs(savings):.2f}"]
    if top:
        highlights.append(f"Biggest expense: {top.get('description') or 'expense'} (${amount(top):.2f})")
    highlights.append(f"Financial tracking: {len(entries)} {'entry' if len(entries) == 1 else 'entries'}")

    return RecapCard(
        id="finance-card",
        category="finance",
        title=f"You saved ${savings:.2f} this week" if savings >= 0 else f"You spent ${abs(savings):.2f} more than you earned",
        subtitle="Financial Journey",
        content=content,
        insights=insights,
        highlights=highlights,
        data={
            "income": income,
            "expenses": expenses,
            "savings": savings,
            "savingsRate": round(rate, 1),
            "topExpense": {"id": top.get("id"), "description": top.get("description"), "amount": amount(top)} if top else None,
            "totalEntries": len(entries),
        },
    )


def build_recap_cards(data: dict, start: datetime, end: datetime) -> list[RecapCard]:
    """cards in display order: people, mood, places, growth, goals, finance.

    entries, check-ins and tasks are cut to the window by creation time,
    finance entries by their own date. people and goals are taken whole.
    """
    entries = [e for e in data.get("journal_entries", []) if _within(e.get("created_at"), start, end)]
    check_ins = [c for c in data.get("check_ins", []) if _within(c.get("created_at"), start, end)]
    tasks = [t for t in data.get("tasks", []) if _within(t.get("created_at"), start, end)]
    finance = [
        f for f in data.get("finance_entries", []) if _on_days(f.get("date") or f.get("created_at"), start, end)
    ]

    cards = [
        people_card(data.get("people", []), entries, start, end),
        mood_card(check_ins),
        places_card(entries),
        growth_card(entries),
        goals_card(data.get("goals", []), tasks),
        finance_card(finance),
    ]
    built = [c for c in cards if c is not None]
    logger.info(f"Built {len(built)} recap cards from {len(entries)} entries and {len(check_ins)} check-ins")
    return built
