# tracking models — quick check-ins, people, finance entries, tasks and goals
# mirrors the client-side types for the dashboard pages

from typing import Optional, Literal
from pydantic import BaseModel, Field, field_validator

MoodEmoji = Literal["😊", "🙂", "😐", "😞", "😢", "😡", "😴", "🤔", "😌", "😤"]
Priority = Literal["high", "medium", "low"]
Sentiment = Literal["positive", "negative", "neutral"]


def reject_null(value):
    """partial updates may omit a field but not clear a required one"""
    if value is None:
        raise ValueError("Field cannot be null")
    return value


# check-ins

class CheckInCreate(BaseModel):
    mood: MoodEmoji
    energy: int = Field(..., ge=1, le=10)
    movement: int = Field(5, ge=1, le=10)
    sleep_hours: int = Field(0, ge=0, le=24, alias="sleepHours")
    sleep_minutes: int = Field(0, ge=0, le=59, alias="sleepMinutes")
    note: Optional[str] = Field(None, max_length=2000)

    model_config = {"populate_by_name": True}


class CheckInResponse(BaseModel):
    id: str
    mood: str
    energy: int
    movement: int = 5
    sleep_hours: int = Field(0, alias="sleepHours")
    sleep_minutes: int = Field(0, alias="sleepMinutes")
    note: Optional[str] = None
    created_at: str = Field(..., alias="createdAt")

    model_config = {"populate_by_name": True}


class CheckInTrendPoint(BaseModel):
    date: str
    mood_score: float = Field(..., alias="moodScore")
    energy: float
    sleep_hours: float = Field(..., alias="sleepHours")
    count: int

    model_config = {"populate_by_name": True}


# people

class JournalMention(BaseModel):
    journal_id: str = Field(..., alias="journalId")
    timestamp: str
    context: str = ""
    sentiment: Sentiment = "neutral"

    model_config = {"populate_by_name": True}


class PersonCreate(BaseModel):
    name: str = Field(..., min_length=1)
    relationship: str = Field(..., min_length=1)
    display_picture: Optional[str] = Field(None, alias="displayPicture")
    context: Optional[str] = None

    model_config = {"populate_by_name": True}


class PersonUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    relationship: Optional[str] = None
    display_picture: Optional[str] = Field(None, alias="displayPicture")
    context: Optional[str] = None

    model_config = {"populate_by_name": True}

    @field_validator("name", "relationship")
    @classmethod
    def required_not_null(cls, v):
        return reject_null(v)


class PersonResponse(BaseModel):
    id: str
    user_id: str = Field(..., alias="userId")
    name: str
    relationship: Optional[str] = None
    display_picture: Optional[str] = Field(None, alias="displayPicture")
    context: Optional[str] = None
    frequency: int = 0
    last_mentioned: Optional[str] = Field(None, alias="lastMentioned")
    journal_mentions: list[JournalMention] = Field(default_factory=list, alias="journalMentions")
    interaction_count: int = Field(0, alias="interactionCount")
    last_interaction: Optional[str] = Field(None, alias="lastInteraction")
    sentiment: Sentiment = "neutral"
    created_at: str = Field(..., alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    model_config = {"populate_by_name": True}


# finance

FinanceCategory = Literal["income", "expense", "investment", "debt"]
RecurringPattern = Literal["daily", "weekly", "monthly", "yearly"]


class FinanceEntryCreate(BaseModel):
    amount: float
    currency: str = Field(..., min_length=1, max_length=8)
    category: FinanceCategory
    subcategory: Optional[str] = None
    description: str = Field(..., min_length=1)
    date: str = Field(..., min_length=1)
    recurring: bool = False
    recurring_pattern: Optional[RecurringPattern] = Field(None, alias="recurringPattern")
    priority: Priority = "medium"
    tags: list[str] = Field(default_factory=list)
    notes: Optional[str] = None

    model_config = {"populate_by_name": True}


class FinanceEntryUpdate(BaseModel):
    amount: Optional[float] = None
    currency: Optional[str] = None
    category: Optional[FinanceCategory] = None
    subcategory: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None
    recurring: Optional[bool] = None
    recurring_pattern: Optional[RecurringPattern] = Field(None, alias="recurringPattern")
    priority: Optional[Priority] = None
    tags: Optional[list[str]] = None
    notes: Optional[str] = None

    model_config = {"populate_by_name": True}

    @field_validator(
        "amount", "currency", "category", "description", "date", "recurring", "priority", "tags",
    )
    @classmethod
    def required_not_null(cls, v):
        return reject_null(v)


class FinanceEntryResponse(BaseModel):
    id: str
    amount: float
    currency: str = "USD"
    category: str
    subcategory: Optional[str] = None
    description: str = ""
    date: Optional[str] = None
    recurring: bool = False
    recurring_pattern: Optional[str] = Field(None, alias="recurringPattern")
    priority: str = "medium"
    tags: list[str] = Field(default_factory=list)
    notes: Optional[str] = None
    source: str = "manual"
    journal_entry_id: Optional[str] = Field(None, alias="journalEntryId")
    created_at: str = Field(..., alias="createdAt")

    model_config = {"populate_by_name": True}


class CategoryBreakdown(BaseModel):
    category: str
    amount: float
    percentage: float
    count: int


class FinanceSummary(BaseModel):
    total_income: float = Field(0.0, alias="totalIncome")
    total_expenses: float = Field(0.0, alias="totalExpenses")
    total_investments: float = Field(0.0, alias="totalInvestments")
    total_debt: float = Field(0.0, alias="totalDebt")
    net: float = 0.0
    category_breakdown: list[CategoryBreakdown] = Field(default_factory=list, alias="categoryBreakdown")

    model_config = {"populate_by_name": True}


# tasks

TaskStatus = Literal["pending", "in-progress", "completed"]


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    status: TaskStatus = "pending"
    priority: Priority = "medium"
    start_date: Optional[str] = Field(None, alias="startDate")
    deadline: Optional[str] = None
    category: Optional[str] = None
    assignee: Optional[str] = None
    remarks: Optional[str] = None

    model_config = {"populate_by_name": True}


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[Priority] = None
    start_date: Optional[str] = Field(None, alias="startDate")
    deadline: Optional[str] = None
    category: Optional[str] = None
    assignee: Optional[str] = None
    remarks: Optional[str] = None
    is_completed: Optional[bool] = Field(None, alias="isCompleted")
    completed_date: Optional[str] = Field(None, alias="completedDate")

    model_config = {"populate_by_name": True}

    @field_validator("title", "status", "priority")
    @classmethod
    def required_not_null(cls, v):
        return reject_null(v)


class TaskResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    status: str = "pending"
    priority: str = "medium"
    start_date: Optional[str] = Field(None, alias="startDate")
    deadline: Optional[str] = None
    category: Optional[str] = None
    assignee: Optional[str] = None
    remarks: Optional[str] = None
    is_completed: bool = Field(False, alias="isCompleted")
    completed_date: Optional[str] = Field(None, alias="completedDate")
    source: str = "manual"
    journal_entry_id: Optional[str] = Field(None, alias="journalEntryId")
    created_at: str = Field(..., alias="createdAt")

    model_config = {"populate_by_name": True}


# goals

GoalStatus = Literal["pending", "in-progress", "completed", "paused"]


class GoalCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    target_date: str = Field(..., alias="targetDate", min_length=1)
    life_area_id: str = Field(..., alias="lifeAreaId", min_length=1)
    priority: Priority = "medium"
    category: str = ""

    model_config = {"populate_by_name": True}


class GoalUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    target_date: Optional[str] = Field(None, alias="targetDate")
    life_area_id: Optional[str] = Field(None, alias="lifeAreaId")
    priority: Optional[Priority] = None
    category: Optional[str] = None
    status: Optional[GoalStatus] = None
    progress: Optional[int] = Field(None, ge=0, le=100)

    model_config = {"populate_by_name": True}

    @field_validator(
        "title", "description", "target_date", "life_area_id", "priority", "category", "status", "progress",
    )
    @classmethod
    def required_not_null(cls, v):
        return reject_null(v)


class GoalResponse(BaseModel):
    id: str
    user_id: str = Field(..., alias="userId")
    title: str
    description: str = ""
    target_date: Optional[str] = Field(None, alias="targetDate")
    life_area_id: Optional[str] = Field(None, alias="lifeAreaId")
    priority: str = "medium"
    category: str = ""
    status: str = "pending"
    progress: int = 0
    created_at: str = Field(..., alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    model_config = {"populate_by_name": True}


class MessageResponse(BaseModel):
    message: str
    id: Optional[str] = None
