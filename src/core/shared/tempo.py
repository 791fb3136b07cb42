"""Relógio do domínio."""

from datetime import datetime, timezone


def agora() -> datetime:
    """Data/hora atual com fuso (UTC), compatível com o ORM com USE_TZ."""
    return datetime.now(timezone.utc)
