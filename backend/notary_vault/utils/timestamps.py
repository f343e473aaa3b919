from datetime import date, datetime, timezone

ISO_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def now_iso() -> str:
    return datetime.now(timezone.utc).strftime(ISO_FORMAT)


def to_iso(value: datetime | None) -> str:
    """Format as UTC ISO-8601; naive datetimes are taken to be UTC."""
    if value is None:
        return now_iso()
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(ISO_FORMAT)


def to_date_iso(value: date) -> str:
    return value.isoformat()
