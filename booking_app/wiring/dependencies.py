from functools import lru_cache
import logging
import random
from zoneinfo import ZoneInfo

from booking_app.core.config import settings
from booking_app.application.ports.booking_gateway import BookingGatewayPort
from booking_app.application.ports.token_source import TokenSourcePort
from booking_app.application.use_cases.availability import AvailabilityEngine, AvailabilityPolicy
from booking_app.application.use_cases.booking_service import BookingService
from booking_app.application.use_cases.booking_session import BookingSessionMachine
from booking_app.infrastructure.gateway.http_gateway import HttpBookingGateway
from booking_app.infrastructure.gateway.local_gateway import LocalBookingGateway
from booking_app.infrastructure.store.memory_store import MemoryBookingStore


_booking_store: MemoryBookingStore | None = None


def get_booking_store() -> MemoryBookingStore:
    global _booking_store
    if _booking_store is None:
        _booking_store = MemoryBookingStore()
    return _booking_store


@lru_cache
def get_availability_engine() -> AvailabilityEngine:
    policy = AvailabilityPolicy(
        window_days=settings.AVAILABILITY_WINDOW_DAYS,
        work_start_hour=settings.WORK_START_HOUR,
        work_end_hour=settings.WORK_END_HOUR,
        weekday_open_probability=settings.WEEKDAY_OPEN_PROBABILITY,
        weekend_open_probability=settings.WEEKEND_OPEN_PROBABILITY,
        slot_open_probability=settings.SLOT_OPEN_PROBABILITY,
    )
    return AvailabilityEngine(
        policy=policy,
        rng=random.Random(settings.AVAILABILITY_SEED),
        timezone=ZoneInfo(settings.CALENDAR_TIMEZONE),
    )


def get_booking_service() -> BookingService:
    return BookingService(
        engine=get_availability_engine(),
        store=get_booking_store(),
        valid_tokens=settings.BOOKING_VALID_TOKENS,
    )


def get_booking_gateway() -> BookingGatewayPort:
    logger = logging.getLogger(__name__)
    if settings.ENV.lower() in {"dev", "local"}:
        logger.info("Using LocalBookingGateway (ENV=%s)", settings.ENV)
        return LocalBookingGateway(get_booking_service())
    logger.info("Using HttpBookingGateway (%s)", settings.BOOKING_API_URL)
    return HttpBookingGateway()


async def close_booking_gateway(gateway: BookingGatewayPort) -> None:
    if isinstance(gateway, HttpBookingGateway):
        await gateway.aclose()


def get_session_machine(token_source: TokenSourcePort) -> BookingSessionMachine:
    return BookingSessionMachine(
        gateway=get_booking_gateway(),
        token_source=token_source,
        step_timeout=settings.SESSION_STEP_TIMEOUT_SECONDS,
    )
