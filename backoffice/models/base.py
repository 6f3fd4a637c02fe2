from typing import Any, Dict, Optional, Type, TypeVar
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T", bound="ApiModel")

class ApiModel(BaseModel):
    """
    Base model for records owned by the remote B2B API.
    Fields are snake_case in Python and camelCase on the wire.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore"
    )

    @classmethod
    def from_api(cls: Type[T], data: Optional[Dict[str, Any]]) -> Optional[T]:
        """Convert an API payload to a model."""
        if not data:
            return None
        return cls.model_validate(data)

    def to_api(self, exclude_none: bool = True) -> Dict[str, Any]:
        """Convert a model to an API request body."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=exclude_none)
