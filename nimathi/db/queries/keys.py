"""Key layout and record id helpers for the kv store"""
from datetime import datetime
from typing import Optional
from uuid import uuid4

from nimathi.utils.datetime_helpers import epoch_millis, now_utc


def user_key(user_id: str) -> str:
    return f"user:{user_id}"


def task_key(user_id: str, task_id: str = "") -> str:
    return f"task:{user_id}:{task_id}"


def journal_key(user_id: str, entry_id: str = "") -> str:
    return f"journal:{user_id}:{entry_id}"


def activity_key(user_id: str, activity_id: str = "") -> str:
    return f"activity:{user_id}:{activity_id}"


def feedback_key(feedback_id: str = "") -> str:
    return f"feedback:{feedback_id}"


def new_record_id(owner_id: str, at: Optional[datetime] = None) -> str:
    """
    {owner}_{epoch_millis}_{suffix}

    The millisecond part keeps prefix scans in creation order; the suffix
    keeps two records created in the same millisecond apart.
    """
    return f"{owner_id}_{epoch_millis(at or now_utc())}_{uuid4().hex[:6]}"
