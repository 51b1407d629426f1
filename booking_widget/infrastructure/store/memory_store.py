from __future__ import annotations

from booking_widget.application.ports.session_store import WidgetSessionStorePort
from booking_widget.application.use_cases.booking_flow import BookingFlowController


class MemoryWidgetSessionStore(WidgetSessionStorePort):
    def __init__(self, max_sessions: int = 1000) -> None:
        self._sessions: dict[str, BookingFlowController] = {}
        self._max_sessions = max_sessions

    def get(self, session_id: str) -> BookingFlowController | None:
        return self._sessions.get(session_id)

    def put(self, session_id: str, controller: BookingFlowController) -> None:
        self._sessions[session_id] = controller
        if len(self._sessions) > self._max_sessions:
            # dicts keep insertion order; drop the oldest session
            oldest = next(iter(self._sessions))
            del self._sessions[oldest]

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)
