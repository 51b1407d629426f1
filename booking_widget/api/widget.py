from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query

from booking_widget.api.schemas import (
    BookingDetailsSchema,
    CreateSessionSchema,
    DateOptionSchema,
    SelectDateSchema,
    SelectTimeSchema,
    WidgetStateSchema,
)
from booking_widget.application.ports.session_store import WidgetSessionStorePort
from booking_widget.application.use_cases.booking_flow import BookingFlowController
from booking_widget.core.config import settings
from booking_widget.wiring.dependencies import build_booking_flow, get_session_store


router = APIRouter(prefix="/widget")
logger = logging.getLogger(__name__)


def _get_controller(session_id: str, store: WidgetSessionStorePort) -> BookingFlowController:
    controller = store.get(session_id)
    if controller is None:
        raise HTTPException(status_code=404, detail="Unknown widget session")
    return controller


def _state(session_id: str, controller: BookingFlowController) -> WidgetStateSchema:
    return WidgetStateSchema.from_snapshot(session_id, controller.provider_id, controller.snapshot())


@router.post("/sessions", response_model=WidgetStateSchema, status_code=201)
async def create_session(
    req: CreateSessionSchema,
    store: WidgetSessionStorePort = Depends(get_session_store),
):
    session_id = uuid.uuid4().hex
    controller = build_booking_flow(req.provider_id)
    await controller.load_availability()
    store.put(session_id, controller)
    logger.info("Widget session created", extra={"provider_id": req.provider_id, "error": controller.error})
    return _state(session_id, controller)


@router.get("/sessions/{session_id}", response_model=WidgetStateSchema)
def get_session(session_id: str, store: WidgetSessionStorePort = Depends(get_session_store)):
    return _state(session_id, _get_controller(session_id, store))


@router.post("/sessions/{session_id}/reload", response_model=WidgetStateSchema)
async def reload_availability(session_id: str, store: WidgetSessionStorePort = Depends(get_session_store)):
    controller = _get_controller(session_id, store)
    await controller.load_availability()
    return _state(session_id, controller)


@router.get("/sessions/{session_id}/dates", response_model=list[DateOptionSchema])
def list_dates(
    session_id: str,
    days: int = Query(settings.DATE_PICKER_DAYS, ge=1, le=366),
    store: WidgetSessionStorePort = Depends(get_session_store),
):
    controller = _get_controller(session_id, store)
    return [
        DateOptionSchema(date=option.date, enabled=option.enabled, is_today=option.is_today)
        for option in controller.date_options(days)
    ]


@router.post("/sessions/{session_id}/date", response_model=WidgetStateSchema)
def select_date(
    session_id: str,
    req: SelectDateSchema,
    store: WidgetSessionStorePort = Depends(get_session_store),
):
    controller = _get_controller(session_id, store)
    controller.select_date(req.date)
    return _state(session_id, controller)


@router.post("/sessions/{session_id}/time", response_model=WidgetStateSchema)
def select_time(
    session_id: str,
    req: SelectTimeSchema,
    store: WidgetSessionStorePort = Depends(get_session_store),
):
    controller = _get_controller(session_id, store)
    controller.select_time(req.time)
    return _state(session_id, controller)


@router.post("/sessions/{session_id}/back", response_model=WidgetStateSchema)
def go_back(session_id: str, store: WidgetSessionStorePort = Depends(get_session_store)):
    controller = _get_controller(session_id, store)
    controller.back()
    return _state(session_id, controller)


@router.post("/sessions/{session_id}/submit", response_model=WidgetStateSchema)
async def submit_booking(
    session_id: str,
    req: BookingDetailsSchema,
    store: WidgetSessionStorePort = Depends(get_session_store),
):
    controller = _get_controller(session_id, store)
    result = await controller.submit(req.to_form())
    if result is not None:
        logger.info(
            "Widget submission finished",
            extra={"provider_id": controller.provider_id, "status": result.status},
        )
    return _state(session_id, controller)


@router.post("/sessions/{session_id}/reset", response_model=WidgetStateSchema)
def reset_session(session_id: str, store: WidgetSessionStorePort = Depends(get_session_store)):
    controller = _get_controller(session_id, store)
    controller.reset()
    return _state(session_id, controller)


@router.delete("/sessions/{session_id}", status_code=204)
def close_session(session_id: str, store: WidgetSessionStorePort = Depends(get_session_store)):
    if not store.delete(session_id):
        raise HTTPException(status_code=404, detail="Unknown widget session")
