# fastapi dependency injection
# resolves the journal owner from the bearer token

import logging
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from journaling_app.services.auth_service import decode_token
from journaling_app.services.db import Database, get_db

logger = logging.getLogger(__name__)

security = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Database = Depends(get_db),
) -> dict:
    """extract and validate the current user from the jwt bearer token"""
    payload = decode_token(credentials.credentials)

    if payload is None:
        raise _unauthorized("Invalid or expired token")
    if payload.get("type") != "access":
        raise _unauthorized("Invalid token type")

    user_id = payload.get("sub")
    if not user_id:
        raise _unauthorized("Token missing subject")

    user = await db.users.find_one({"id": user_id})
    if not user:
        raise _unauthorized("User not found")

    user = dict(user)
    user.pop("_id", None)
    return user


async def fetch_owned(collection, record_id: str, current_user: dict, label: str) -> dict:
    """load a record by id; 404 when missing, 403 when it belongs to someone else"""
    doc = await collection.find_one({"id": record_id})
    if not doc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    if doc.get("user_id") != current_user["id"]:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    doc = dict(doc)
    doc.pop("_id", None)
    return doc
