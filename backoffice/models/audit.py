from datetime import datetime
from typing import Optional
from pydantic import ConfigDict, Field, field_validator
from backoffice.models.base import ApiModel
from backoffice.models.factor import FactorStatus

class FactorLog(ApiModel):
    """
    Audit entry written by the remote API, one per successful transition.
    Append-only: never mutated or deleted.
    """
    id: Optional[str] = None
    factor_id: str
    status: FactorStatus
    comment: str = ""
    created_at: datetime = Field(..., description="Server timestamp")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "id": "log_1",
            "factorId": "f_123",
            "status": "approved_by_manager",
            "comment": "وضعیت فاکتور تغییر کرد",
            "createdAt": "2024-02-01T10:00:00Z"
        }
    })

    @field_validator("id", "factor_id", mode="before")
    @classmethod
    def coerce_ids(cls, v):
        return str(v) if v is not None else v
