# auth router — signup, login, token refresh and profile for journal owners

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from journaling_app.models.user import (
    UserCreate,
    UserLogin,
    TokenResponse,
    RefreshRequest,
    UserResponse,
    UserSettings,
    ProfileUpdate,
)
from journaling_app.services.auth_service import hash_password, verify_password, issue_token_pair, decode_token
from journaling_app.services.db import Database, get_db
from journaling_app.services.records import new_record_id, now_iso
from journaling_app.dependencies import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _doc_to_user(doc: dict) -> UserResponse:
    return UserResponse(
        id=doc["id"],
        email=doc.get("email", ""),
        name=doc.get("name"),
        avatarUrl=doc.get("avatar_url"),
        settings=UserSettings.model_validate(doc.get("settings") or {}),
        createdAt=doc.get("created_at", ""),
        updatedAt=doc.get("updated_at"),
    )


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(body: UserCreate, db: Database = Depends(get_db)):
    """register a new account and return a token pair"""
    email = _normalize_email(body.email)
    if "@" not in email:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Invalid email address")

    existing = await db.users.find_one({"email": email})
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    now = now_iso()
    user_id = new_record_id(email)
    await db.users.insert_one({
        "id": user_id,
        "email": email,
        "name": body.name or email.split("@")[0],
        "hashed_password": hash_password(body.password),
        "avatar_url": None,
        "settings": UserSettings().model_dump(),
        "created_at": now,
        "updated_at": now,
    })
    logger.info(f"New user registered: {user_id}")
    return TokenResponse(**issue_token_pair(user_id, email))


@router.post("/login", response_model=TokenResponse)
async def login(body: UserLogin, db: Database = Depends(get_db)):
    email = _normalize_email(body.email)
    user = await db.users.find_one({"email": email})
    if not user or not verify_password(body.password, user.get("hashed_password")):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    logger.info(f"User logged in: {user['id']}")
    return TokenResponse(**issue_token_pair(user["id"], email))


@router.post("/refresh", response_model=TokenResponse)
async def refresh(body: RefreshRequest, db: Database = Depends(get_db)):
    """exchange a refresh token for a new token pair"""
    payload = decode_token(body.refresh_token)
    if payload is None or payload.get("type") != "refresh":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    user = await db.users.find_one({"id": payload.get("sub")})
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    return TokenResponse(**issue_token_pair(user["id"], user.get("email", "")))


@router.get("/me", response_model=UserResponse)
async def me(current_user: dict = Depends(get_current_user)):
    return _doc_to_user(current_user)


@router.patch("/profile", response_model=UserResponse)
async def update_profile(
    body: ProfileUpdate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """update display name, avatar or app settings"""
    updates = {}
    if body.name is not None:
        updates["name"] = body.name
    if body.avatar_url is not None:
        updates["avatar_url"] = body.avatar_url
    if body.settings is not None:
        updates["settings"] = body.settings.model_dump()

    if updates:
        updates["updated_at"] = now_iso()
        await db.users.update_one({"id": current_user["id"]}, {"$set": updates})

    return _doc_to_user({**current_user, **updates})
