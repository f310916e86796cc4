"""
Key-value store queries - re-exported for 'from nimathi.db import queries'

Module organization:
- keys.py: key layout and record ids
- user.py: user profiles
- activity.py: activity log
- tasks.py: task scheduler
- journal.py: journal entries
- feedback.py: feedback submissions
"""

from nimathi.db.queries.keys import new_record_id

from nimathi.db.queries.user import (
    get_profile,
    put_profile,
)

from nimathi.db.queries.activity import (
    append_activity,
    get_activities,
)

from nimathi.db.queries.tasks import (
    save_task,
    get_task,
    get_tasks,
)

from nimathi.db.queries.journal import (
    save_journal_entry,
    get_journal_entries,
)

from nimathi.db.queries.feedback import save_feedback

__all__ = [
    "new_record_id",
    "get_profile",
    "put_profile",
    "append_activity",
    "get_activities",
    "save_task",
    "get_task",
    "get_tasks",
    "save_journal_entry",
    "get_journal_entries",
    "save_feedback",
]
