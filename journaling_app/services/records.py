# shared helpers for document ids, timestamps and tolerant parsing of stored values

import hashlib
import json
import logging
import uuid
from datetime import date, datetime, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def now_iso() -> str:
    return utcnow().isoformat()


def new_record_id(*parts: Any) -> str:
    """12-char md5 id derived from owner/payload parts plus a random salt"""
    raw = ":".join(str(p) for p in parts) + f":{now_iso()}:{uuid.uuid4().hex}"
    return hashlib.md5(raw.encode()).hexdigest()[:12]


def parse_datetime(value: Any) -> Optional[datetime]:
    """parse iso strings / dates into aware utc datetimes, none when unparseable"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        try:
            dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def load_json(value: Any, default: Any):
    """stored documents may hold legacy json strings; decode them, keep native values"""
    if value is None:
        return default
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            logger.warning("Could not decode stored json value, using default")
            return default
    return value


def clean_doc(doc: Optional[dict]) -> Optional[dict]:
    """drop the mongodb _id so documents can be returned or compared as plain dicts"""
    if doc is None:
        return None
    out = dict(doc)
    out.pop("_id", None)
    return out
