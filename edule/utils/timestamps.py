from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def utcnow_iso() -> str:
    """Current UTC time as an ISO 8601 string, the format stored in records."""
    return utcnow().isoformat()


def iso_in(hours: int) -> str:
    return (utcnow() + timedelta(hours=hours)).isoformat()


def is_past(value: str) -> bool:
    try:
        moment = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return True
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment <= utcnow()
