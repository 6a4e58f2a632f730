# journal models — entry creation, update and response schemas

from typing import Optional, Literal
from pydantic import BaseModel, Field, model_validator

from journaling_app.config import settings
from journaling_app.models.analysis import AnalysisResult, StoredAnalysis

ProcessingType = Literal["transcribe-only", "full-analysis"]
ProcessingStatus = Literal["draft", "transcribed", "analyzed", "completed"]


class JournalEntryCreate(BaseModel):
    """payload for a new text or voice entry; one of content/transcription is required"""
    content: str = Field("", max_length=settings.JOURNAL_MAX_LENGTH)
    audio_url: Optional[str] = Field(None, alias="audioUrl")
    transcription: Optional[str] = Field(None, max_length=settings.JOURNAL_MAX_LENGTH)
    entry_type: Literal["text", "voice"] = Field("text", alias="entryType")
    processing_type: ProcessingType = Field("full-analysis", alias="processingType")
    processing_status: ProcessingStatus = Field("draft", alias="processingStatus")
    tags: list[str] = Field(default_factory=list)
    mood: Optional[str] = None

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _has_text(self):
        if not self.content.strip() and not (self.transcription or "").strip() and not self.audio_url:
            raise ValueError("content, transcription or audioUrl is required")
        return self


class JournalEntryUpdate(BaseModel):
    content: Optional[str] = Field(None, max_length=settings.JOURNAL_MAX_LENGTH)
    transcription: Optional[str] = Field(None, max_length=settings.JOURNAL_MAX_LENGTH)
    tags: Optional[list[str]] = None
    mood: Optional[str] = None
    processing_type: Optional[ProcessingType] = Field(None, alias="processingType")
    processing_status: Optional[ProcessingStatus] = Field(None, alias="processingStatus")
    user_confirmed_transcription: Optional[bool] = Field(None, alias="userConfirmedTranscription")
    user_confirmed_analysis: Optional[bool] = Field(None, alias="userConfirmedAnalysis")

    model_config = {"populate_by_name": True}


class UserConfirmed(BaseModel):
    transcription: bool = False
    analysis: bool = False


class ProcessingStep(BaseModel):
    step: Literal["transcription", "analysis", "entity-extraction"]
    status: Literal["pending", "processing", "completed", "failed"]
    start_time: str = Field(..., alias="startTime")
    end_time: Optional[str] = Field(None, alias="endTime")
    error: Optional[str] = None
    retry_count: int = Field(0, alias="retryCount")

    model_config = {"populate_by_name": True}


class JournalEntryResponse(BaseModel):
    id: str
    user_id: str = Field(..., alias="userId")
    content: str = ""
    audio_url: Optional[str] = Field(None, alias="audioUrl")
    transcription: Optional[str] = None
    entry_type: str = Field("text", alias="entryType")
    processing_type: ProcessingType = Field("full-analysis", alias="processingType")
    processing_status: ProcessingStatus = Field("draft", alias="processingStatus")
    tags: list[str] = Field(default_factory=list)
    mood: Optional[str] = None
    can_be_analyzed: bool = Field(False, alias="canBeAnalyzed")
    user_confirmed: UserConfirmed = Field(default_factory=UserConfirmed, alias="userConfirmed")
    processing_history: list[ProcessingStep] = Field(default_factory=list, alias="processingHistory")
    created_at: str = Field(..., alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    model_config = {"populate_by_name": True}


class JournalEntryCreated(BaseModel):
    id: str
    message: str = "Journal entry created"


class JournalEntryDetail(BaseModel):
    entry: JournalEntryResponse
    analysis: Optional[StoredAnalysis] = None


class AnalyzeRequest(BaseModel):
    entry_id: Optional[str] = Field(None, alias="entryId")
    processing_type: ProcessingType = Field("full-analysis", alias="processingType")

    model_config = {"populate_by_name": True}


class AnalyzeResponse(BaseModel):
    message: str
    status: ProcessingStatus
    analysis_id: Optional[str] = Field(None, alias="analysisId")
    analysis: Optional[AnalysisResult] = None

    model_config = {"populate_by_name": True}


class TranscribeRequest(BaseModel):
    audio_url: str = Field(..., alias="audioUrl", min_length=1)

    model_config = {"populate_by_name": True}


class TranscribeResponse(BaseModel):
    transcription: str
    success: bool = True
