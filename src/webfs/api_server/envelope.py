# src/webfs/api_server/envelope.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success(payload: Any = "") -> JSONResponse:
    """`{"success": true, "msg": payload}`; payload may be a string or a model."""
    return JSONResponse({"success": True, "msg": jsonable_encoder(payload)})


def failure(message: str) -> JSONResponse:
    """`{"success": false, "msg": message}`. Outcome lives in the body, so status stays 200."""
    return JSONResponse({"success": False, "msg": message})
