"""
Response envelope.

Every API response is wrapped as ``{"status", "data", "message", "code"}``:
``success`` carries data, ``fail`` marks a client-correctable problem and
``error`` an authentication failure or server fault.
"""

from typing import Generic, Literal, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    status: Literal["success", "fail", "error"]
    data: Optional[T] = None
    message: Optional[str] = None
    code: Optional[str] = None


def success(data: T, message: Optional[str] = None) -> Envelope:
    return Envelope(status="success", data=data, message=message)
