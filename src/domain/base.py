from datetime import UTC, datetime


def utcnow() -> datetime:
    """Timezone-aware now; every entity timestamp goes through here"""
    return datetime.now(UTC)
