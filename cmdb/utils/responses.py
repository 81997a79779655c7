"""
JSON response helpers shared by all routes
"""

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success_response(status_code: int, data: Any) -> JSONResponse:
    """Serialize an entity, a collection or a plain dict"""
    return JSONResponse(status_code=status_code, content=jsonable_encoder(data))


def error_response(status_code: int, message: str) -> JSONResponse:
    """Uniform error envelope: {"error": "<message>"}"""
    return JSONResponse(status_code=status_code, content={"error": message})
