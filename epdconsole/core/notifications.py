# -*- coding: utf-8 -*-
"""Status history: every message shown on the status line is recorded here."""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from epdconsole.core.db import EventLog, SessionLocal

STATUS_SOURCES = ("config", "dashboard", "wifi", "actions", "system")


def _resolve_source(source: Optional[str]) -> str:
    if source in STATUS_SOURCES:
        return source
    return "system"


def log_event(event: str, *, level: str = "info", meta: Optional[Dict[str, object]] = None,
              source: Optional[str] = None) -> None:
    """Persist a status message to the database."""
    resolved = _resolve_source(source)
    try:
        with SessionLocal() as session:
            session.add(EventLog(level=level, event=event, source=resolved, meta=dict(meta) if meta else None))
            session.commit()
    except Exception:
        # Historia statusów nie może przerwać akcji użytkownika
        return


def record_status(message: str, severity: str, source: Optional[str] = None) -> None:
    log_event(message, level=severity, source=source)


def list_notifications(limit: int = 50, levels: Optional[Iterable[str]] = None,
                       sources: Optional[Iterable[str]] = None) -> List[Dict[str, object]]:
    """Return recent status messages, newest first.

    Filters are applied in the query, so ``limit`` counts matching rows only.
    """
    with SessionLocal() as session:
        query = session.query(EventLog)
        if levels:
            query = query.filter(EventLog.level.in_(set(levels)))
        if sources:
            query = query.filter(EventLog.source.in_(set(sources)))
        query = query.order_by(EventLog.ts.desc(), EventLog.id.desc()).limit(limit)
        rows = list(query)
    return [
        {
            "id": row.id,
            "timestamp": row.ts.isoformat() if row.ts else None,
            "level": row.level,
            "message": row.event,
            "source": row.source or "system",
        }
        for row in rows
    ]


__all__ = [
    "log_event",
    "record_status",
    "list_notifications",
]
