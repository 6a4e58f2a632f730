# user models — signup/login payloads, tokens and profile

from typing import Optional, Literal
from pydantic import BaseModel, Field


class UserSettings(BaseModel):
    theme: Literal["light", "dark"] = "light"
    notifications: bool = True
    auto_save: bool = Field(True, alias="autoSave")
    processing_type: Literal["transcribe-only", "full-analysis"] = Field("full-analysis", alias="processingType")

    model_config = {"populate_by_name": True}


class UserCreate(BaseModel):
    email: str = Field(..., description="user email address")
    password: str = Field(..., min_length=8, description="plaintext password (min 8 chars)")
    name: Optional[str] = Field(None, description="display name")


class UserLogin(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str = Field(..., alias="accessToken")
    refresh_token: str = Field(..., alias="refreshToken")
    token_type: str = "bearer"

    model_config = {"populate_by_name": True}


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., alias="refreshToken")

    model_config = {"populate_by_name": True}


class UserResponse(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    avatar_url: Optional[str] = Field(None, alias="avatarUrl")
    settings: UserSettings = Field(default_factory=UserSettings)
    created_at: str = Field(..., alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    model_config = {"populate_by_name": True}


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    avatar_url: Optional[str] = Field(None, alias="avatarUrl")
    settings: Optional[UserSettings] = None

    model_config = {"populate_by_name": True}
