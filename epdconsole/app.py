# -*- coding: utf-8 -*-
# epdconsole/app.py – punkt wejścia FastAPI/uvicorn
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from epdconsole.core.config import settings, ensure_dirs
from epdconsole.core.db import init_db
from epdconsole.core.controller import Controller
from epdconsole.routers import api, ws

app = FastAPI(title="EPD Clock Console", version="1.0.0")

# CORS (ułatwia podmianę frontu zewnętrznego)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routery
app.include_router(api.router, prefix="/api", tags=["api"])
app.include_router(ws.router, tags=["ws"])

# Obiekty runtime
controller: Controller = None

@app.on_event("startup")
async def on_startup():
    logging.basicConfig(level=settings.LOG_LEVEL.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    ensure_dirs()
    init_db()
    # Kontroler (stan formularza + polling dashboardu + akcje)
    global controller
    controller = Controller()
    controller.start()  # odczyt konfiguracji i timery


@app.on_event("shutdown")
async def on_shutdown():
    if controller: await controller.stop()

# Strona główna
@app.get("/")
async def index():
    return {"ok": True, "message": "EPD console running. State: /api/state, live updates: /ws"}
