from typing import Generic, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Wire format is camelCase; Python attributes stay snake_case
CAMEL_CONFIG = {"alias_generator": to_camel, "populate_by_name": True, "from_attributes": True}


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T | None = None
    error: str | None = None
    code: str | None = None
    message: str | None = None
