from pydantic import BaseModel
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ServiceResult(BaseModel, Generic[T]):
    """
    Uniform envelope returned by every service operation.

    Callers branch on ``is_success``; failures carry a readable
    ``exception_message`` instead of raising.
    """
    is_success: bool = False
    entity: Optional[T] = None
    items: list[T] = []
    total_count: int = 0
    exception_message: Optional[str] = None
