from collections.abc import Callable
from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from booking_widget.core.config import settings
from booking_widget.application.ports.availability import AvailabilityPort
from booking_widget.application.ports.booking_service import BookingServicePort
from booking_widget.application.ports.clock import ClockPort
from booking_widget.application.ports.session_store import WidgetSessionStorePort
from booking_widget.application.use_cases.booking_flow import BookingFlowController
from booking_widget.application.use_cases.booking_submitter import BookingSubmitter
from booking_widget.infrastructure.booking_api.booking_api_client import BookingApiClient
from booking_widget.infrastructure.booking_api.mock_booking_api import MockBookingApi
from booking_widget.infrastructure.clock.system_clock import SystemClock
from booking_widget.infrastructure.store.memory_store import MemoryWidgetSessionStore


_booking_api: BookingApiClient | MockBookingApi | None = None
_session_store: WidgetSessionStorePort | None = None


@lru_cache
def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BOOKING_TIME_ZONE)


def get_booking_api() -> BookingApiClient | MockBookingApi:
    global _booking_api
    if _booking_api is None:
        logger = logging.getLogger(__name__)
        if not settings.BOOKING_API_BASE_URL:
            if settings.ENV.lower() in {"dev", "local"}:
                logger.info("Using MockBookingApi (BOOKING_API_BASE_URL missing, ENV=dev/local)")
                _booking_api = MockBookingApi(timezone=get_timezone())
            else:
                raise ValueError("BOOKING_API_BASE_URL is required outside dev/local.")
        else:
            logger.info("Using BookingApiClient", extra={"base_url": settings.BOOKING_API_BASE_URL})
            _booking_api = BookingApiClient()
    return _booking_api


def get_availability() -> AvailabilityPort:
    return get_booking_api()


def get_booking_service() -> BookingServicePort:
    return get_booking_api()


def get_clock() -> ClockPort:
    return SystemClock(get_timezone())


def get_session_store() -> WidgetSessionStorePort:
    global _session_store
    if _session_store is None:
        _session_store = MemoryWidgetSessionStore()
    return _session_store


def build_booking_flow(
    provider_id: int,
    on_booking_complete: Callable[[], None] | None = None,
) -> BookingFlowController:
    return BookingFlowController(
        provider_id=provider_id,
        availability=get_availability(),
        submitter=BookingSubmitter(booking_service=get_booking_service(), provider_id=provider_id),
        clock=get_clock(),
        timezone=get_timezone(),
        slot_duration_minutes=settings.DEFAULT_SLOT_DURATION_MINUTES,
        on_booking_complete=on_booking_complete,
    )


async def close_booking_api() -> None:
    global _booking_api
    if isinstance(_booking_api, BookingApiClient):
        await _booking_api.aclose()
        logging.getLogger(__name__).info("Closed BookingApiClient")
    _booking_api = None
