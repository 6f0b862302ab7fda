from datetime import datetime, timezone
from typing import Optional


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def format_task_age(created_at: datetime, now: Optional[datetime] = None) -> str:
    """
    Human label for how long ago a task was created

    Naive datetimes are read as UTC. Months are counted as 30 days.
    """
    if created_at.tzinfo is not None:
        created_at = created_at.astimezone(timezone.utc).replace(tzinfo=None)
    if now is None:
        now = datetime.utcnow()
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc).replace(tzinfo=None)

    minutes = int((now - created_at).total_seconds() // 60)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return _plural(minutes, "minute")

    hours = minutes // 60
    if hours < 24:
        return _plural(hours, "hour")

    days = hours // 24
    if days < 30:
        return _plural(days, "day")

    return _plural(days // 30, "month")
