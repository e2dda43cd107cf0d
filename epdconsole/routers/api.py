# -*- coding: utf-8 -*-
# epdconsole/routers/api.py - REST API for the configuration page
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from epdconsole.core.form_helpers import FormValidationError
from epdconsole.core.notifications import list_notifications
from epdconsole.core.schemas import (
    ActionResultDTO,
    FormEditPayload,
    RebootPayload,
    StateDTO,
    StatusDTO,
    WifiSelectPayload,
)
from epdconsole.core.security import require_admin


def _controller():
    """Lazy reference to the controller instance from FastAPI app."""
    from epdconsole.app import controller  # lazy import to avoid circular deps

    if controller is None:
        raise HTTPException(status_code=503, detail="Controller not ready")
    return controller


def _result(controller, ok: bool) -> ActionResultDTO:
    status = controller.state.status
    return ActionResultDTO(ok=ok, status=StatusDTO(message=status.message, severity=status.severity))


# Handlers touching FormState are coroutines: the state lives on the event loop
router = APIRouter()


@router.get("/state", response_model=StateDTO)
async def get_state():
    return StateDTO(**_controller().snapshot())


@router.patch("/form", response_model=StateDTO)
async def edit_form(payload: FormEditPayload):
    controller = _controller()
    try:
        controller.edit(payload.values)
    except FormValidationError as exc:
        raise HTTPException(status_code=400, detail={"msg": str(exc), "field": exc.field})
    return StateDTO(**controller.snapshot())


@router.post("/config/load", response_model=ActionResultDTO)
async def load_config():
    controller = _controller()
    ok = await controller.reload()
    return _result(controller, ok)


@router.post("/config/save", response_model=ActionResultDTO)
async def save_config(_: None = Depends(require_admin)):
    controller = _controller()
    ok = await controller.save()
    return _result(controller, ok)


@router.post("/wifi/scan", response_model=ActionResultDTO)
async def scan_wifi():
    controller = _controller()
    ok = await controller.scan()
    return _result(controller, ok)


@router.post("/wifi/select", response_model=StateDTO)
async def select_wifi(payload: WifiSelectPayload):
    controller = _controller()
    controller.select_network(payload.ssid)
    return StateDTO(**controller.snapshot())


@router.post("/logs/scroll", response_model=StateDTO)
async def scroll_logs(line: int = Query(..., ge=0)):
    controller = _controller()
    controller.scroll_logs(line)
    return StateDTO(**controller.snapshot())


@router.post("/actions/reboot", response_model=ActionResultDTO)
async def reboot_device(payload: RebootPayload, _: None = Depends(require_admin)):
    controller = _controller()
    ok = await controller.reboot(lambda: payload.confirm)
    return _result(controller, ok)


@router.post("/actions/mqtt-test", response_model=ActionResultDTO)
async def mqtt_test():
    controller = _controller()
    ok = await controller.connectivity_test()
    return _result(controller, ok)


@router.get("/notifications")
def get_notifications(
    limit: int = Query(50, ge=1, le=500),
    level: Optional[List[str]] = Query(None),
    source: Optional[List[str]] = Query(None),
):
    return list_notifications(limit=limit, levels=level, sources=source)
