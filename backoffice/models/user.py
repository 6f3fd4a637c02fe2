from enum import Enum
from typing import Dict, Optional
from pydantic import BaseModel, Field

class ActorRole(str, Enum):
    CUSTOMER = "customer"
    SALEMANAGER = "sale_manager"
    MARKETER = "marketer"
    DEVELOPER = "developer"
    FINANCEMANAGER = "finance_manager"
    MANAGER = "manager"

    @classmethod
    def from_name(cls, name: Optional[str]) -> "ActorRole":
        """Unknown or missing role names fall back to the unprivileged customer."""
        try:
            return cls(name)
        except ValueError:
            return cls.CUSTOMER

ROLE_DISPLAY_NAMES: Dict[ActorRole, str] = {
    ActorRole.CUSTOMER: "مشتری",
    ActorRole.SALEMANAGER: "مدیر فروش",
    ActorRole.MARKETER: "کارشناس فروش",
    ActorRole.DEVELOPER: "توسعه دهنده",
    ActorRole.FINANCEMANAGER: "مدیر مالی",
    ActorRole.MANAGER: "مدیر کل",
}

class User(BaseModel):
    """The authenticated actor behind a request."""
    user_id: str
    token: str = Field(..., exclude=True)
    role: ActorRole = ActorRole.CUSTOMER
    user_name: Optional[str] = None
    full_name: Optional[str] = None

    @property
    def role_name(self) -> str:
        return ROLE_DISPLAY_NAMES[self.role]
