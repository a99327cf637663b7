from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    error: Optional[str] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class SuccessResponse(BaseModel):
    message: str
    success: bool = True
