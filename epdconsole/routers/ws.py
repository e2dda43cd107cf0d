# -*- coding: utf-8 -*-
# epdconsole/routers/ws.py – WebSocket (push stanu formularza i dashboardu)
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
import asyncio

router = APIRouter()

PUSH_INTERVAL_S = 1.0


@router.websocket("/ws")
async def ws_endpoint(ws: WebSocket):
    from epdconsole import app as app_module  # lazy import to avoid circular deps

    await ws.accept()
    last = None
    try:
        while True:
            controller = app_module.controller
            if controller is not None:
                payload = controller.snapshot()
                # wysyłamy tylko zmiany
                if payload != last:
                    await ws.send_json(payload)
                    last = payload
            await asyncio.sleep(PUSH_INTERVAL_S)
    except WebSocketDisconnect:
        return
