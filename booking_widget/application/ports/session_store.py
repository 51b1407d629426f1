from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from booking_widget.application.use_cases.booking_flow import BookingFlowController


class WidgetSessionStorePort(ABC):
    @abstractmethod
    def get(self, session_id: str) -> "BookingFlowController | None":
        raise NotImplementedError

    @abstractmethod
    def put(self, session_id: str, controller: "BookingFlowController") -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        raise NotImplementedError
