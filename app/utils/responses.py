"""
Standardized response utilities
"""

from fastapi.responses import JSONResponse

from app.schemas.common import ErrorResponse, MessageResponse

def message_response(message: str, status_code: int = 200) -> JSONResponse:
    """Create a plain confirmation response"""
    response = MessageResponse(message=message)
    return JSONResponse(
        content=response.model_dump(),
        status_code=status_code
    )

def error_response(message: str, status_code: int = 400) -> JSONResponse:
    """Create standardized error response"""
    response = ErrorResponse(message=message)
    return JSONResponse(
        content=response.model_dump(),
        status_code=status_code
    )

def validation_message(errors: list) -> str:
    """Flatten request validation errors into one readable message"""
    parts = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg", "Invalid request"))
    return "; ".join(parts) or "Invalid request"
