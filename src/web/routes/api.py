from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, HTTPException, Request

from pipeline.controller import AnalysisController
from ..api_models import (
    ContinuousResponse,
    MediaRequest,
    NoticeModel,
    SessionResponse,
)

router = APIRouter()


def _controller(request: Request) -> AnalysisController:
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        raise HTTPException(status_code=503, detail="Controller not initialized")
    return controller


def _session_response(controller: AnalysisController) -> SessionResponse:
    return SessionResponse(
        **controller.snapshot().to_dict(),
        continuous=controller.continuous,
        in_flight=controller.in_flight,
    )


def _continuous_response(controller: AnalysisController) -> ContinuousResponse:
    scheduler = controller.scheduler
    return ContinuousResponse(
        running=controller.continuous,
        frame_counter=scheduler.state.frame_counter if scheduler is not None else 0,
    )


@router.get("/session", response_model=SessionResponse)
async def get_session(request: Request):
    return _session_response(_controller(request))


@router.post("/media", response_model=SessionResponse)
async def load_media(req: MediaRequest, request: Request):
    controller = _controller(request)
    try:
        controller.open_media(req.path)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (ValueError, RuntimeError) as e:
        logging.warning(f"Failed to load media {req.path}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    return _session_response(controller)


@router.post("/media/release", response_model=SessionResponse)
async def release_media(request: Request):
    controller = _controller(request)
    controller.release_media()
    return _session_response(controller)


@router.post("/detect", response_model=SessionResponse)
async def detect(request: Request):
    controller = _controller(request)
    try:
        await controller.detect_once()
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _session_response(controller)


@router.post("/continuous/start", response_model=ContinuousResponse)
async def start_continuous(request: Request):
    controller = _controller(request)
    try:
        await controller.start_continuous()
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _continuous_response(controller)


@router.post("/continuous/stop", response_model=ContinuousResponse)
async def stop_continuous(request: Request):
    controller = _controller(request)
    controller.stop_continuous()
    return _continuous_response(controller)


@router.get("/notices", response_model=List[NoticeModel])
async def list_notices(request: Request):
    return [NoticeModel(**n.to_dict()) for n in _controller(request).notices.active()]


@router.delete("/notices/{notice_id}")
async def dismiss_notice(notice_id: int, request: Request):
    if not _controller(request).notices.dismiss(notice_id):
        raise HTTPException(status_code=404, detail=f"Notice {notice_id} not found")
    return {"dismissed": notice_id}
