"""In-memory state for the HTTP API, no database required."""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from lopper.models import Report


@dataclass
class AnalysisSession:
    report: Report
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class AppState:
    """Singleton in-memory store shared by all API routes."""

    def __init__(self, max_sessions: int = 64):
        self.max_sessions = max_sessions
        self.analyses: dict[str, AnalysisSession] = {}
        self._lock = threading.Lock()

    def add_analysis(self, report: Report) -> AnalysisSession:
        session = AnalysisSession(report=report)
        with self._lock:
            self.analyses[session.id] = session
            # oldest first; dicts keep insertion order
            while len(self.analyses) > self.max_sessions:
                self.analyses.pop(next(iter(self.analyses)))
        return session

    def get_analysis(self, analysis_id: str) -> AnalysisSession | None:
        return self.analyses.get(analysis_id)

    def clear(self) -> None:
        with self._lock:
            self.analyses.clear()


# Module-level singleton, imported by the routers
state = AppState()
