# -*- coding: utf-8 -*-
# epdconsole/core/security.py – token konsoli dla akcji zmieniających stan urządzenia
import logging
import secrets

from fastapi import Header, HTTPException, status

from epdconsole.core.config import settings, SECURITY


def token_required() -> bool:
    return bool(SECURITY.get("require_token", False))


def require_admin(x_admin_token: str | None = Header(default=None)):
    """Guard for save/reboot: the device itself only knows one admin account."""
    if not token_required():
        return
    if not x_admin_token or not secrets.compare_digest(x_admin_token, settings.ADMIN_TOKEN):
        logging.warning("Rejected console request with missing or invalid admin token")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
