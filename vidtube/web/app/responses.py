"""
Uniform JSON envelope returned by every endpoint.
"""
from dataclasses import dataclass, field
from typing import Any, Dict

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


class InvalidStatusCode(ValueError):
    """Raised when an envelope is built with a status outside 100-599."""

    def __init__(self, status_code: int):
        super().__init__(f"Invalid HTTP status code: {status_code}")
        self.status_code = status_code


@dataclass
class ApiResponse:
    status_code: int
    data: Any = None
    message: str = "Success"
    success: bool = field(init=False)

    def __post_init__(self):
        if not isinstance(self.status_code, int) or not 100 <= self.status_code <= 599:
            raise InvalidStatusCode(self.status_code)
        self.success = self.status_code < 400

    def to_dict(self) -> Dict[str, Any]:
        return {
            "statusCode": self.status_code,
            "data": self.data,
            "message": self.message,
            "success": self.success,
        }

    def to_response(self) -> JSONResponse:
        return JSONResponse(status_code=self.status_code, content=jsonable_encoder(self.to_dict()))


def ok(data: Any = None, message: str = "Success", status_code: int = 200) -> JSONResponse:
    """Shortcut used by the routers for successful outcomes."""
    return ApiResponse(status_code, data, message).to_response()
