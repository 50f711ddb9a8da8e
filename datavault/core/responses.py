from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

def error_body(message: str, code: str = "bad_request", details: Any = None) -> dict:
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"status": "error", "data": None, "error": error}

def err(message: str, code: str = "bad_request", http_status: int = 400, details: Any = None) -> JSONResponse:
    return JSONResponse(
        status_code=http_status,
        content=jsonable_encoder(error_body(message, code, details)),
    )
