from typing import List
from pydantic import BaseModel

from backoffice.guardrails.permissions import (
    ACTION_GATES, ACTION_TARGETS, FactorAction, MANAGER_APPROVERS, can_change_status, can_reject_or_delete, legal_transitions
)
from backoffice.models.factor import Factor, FactorStatus, StatusBadge
from backoffice.models.user import ActorRole

ACTION_LABELS = {
    FactorAction.APPROVE_BY_FINANCE: "تایید مالی",
    FactorAction.APPROVE_BY_MANAGER: "تایید مدیر",
    FactorAction.REJECT: "رد فاکتور",
    FactorAction.DELETE: "حذف فاکتور",
}

ACTION_WARNINGS = {
    FactorAction.APPROVE_BY_FINANCE: "پس از تایید نهایی، فاکتور قابل تغییر نیست.",
    FactorAction.APPROVE_BY_MANAGER: "آیا از تایید این فاکتور اطمینان دارید؟",
    FactorAction.REJECT: "فاکتور رد شده و این عمل قابل بازگشت نیست.",
    FactorAction.DELETE: "آیا از حذف این فاکتور اطمینان دارید؟",
}

# Display order of the buttons
ACTION_ORDER = [
    FactorAction.APPROVE_BY_FINANCE,
    FactorAction.APPROVE_BY_MANAGER,
    FactorAction.REJECT,
    FactorAction.DELETE,
]

class ActionButton(BaseModel):
    action: FactorAction
    target_status: FactorStatus
    label: str
    confirmation_message: str
    requires_confirmation: bool = True

class WorkflowView(BaseModel):
    """Everything the detail page needs to render the workflow section."""
    badge: StatusBadge
    editable: bool
    actions: List[ActionButton]
    status_options: List[StatusBadge]
    guidance: str


def available_actions(factor: Factor, role: ActorRole) -> List[ActionButton]:
    """Buttons whose gate is open for this role and status, in display order."""
    return [
        ActionButton(
            action=action,
            target_status=ACTION_TARGETS[action],
            label=ACTION_LABELS[action],
            confirmation_message=ACTION_WARNINGS[action]
        )
        for action in ACTION_ORDER
        if ACTION_GATES[action](role, factor.status)
    ]


def status_options(factor: Factor, role: ActorRole) -> List[StatusBadge]:
    """Options for the secondary status picker; empty when the picker is hidden."""
    if not can_change_status(role):
        return []
    targets = legal_transitions(role, factor.status)
    return [StatusBadge.for_status(s) for s in FactorStatus if s in targets]


def guidance(factor: Factor, role: ActorRole) -> str:
    lines = []
    if role == ActorRole.FINANCEMANAGER:
        lines.append("شما به عنوان مدیر مالی می‌توانید فاکتورهای تایید شده توسط مدیر را تایید نهایی کنید.")
    if role in MANAGER_APPROVERS:
        lines.append("شما به عنوان مدیر می‌توانید فاکتورهای ایجاد شده را تایید کنید.")
    if factor.status == FactorStatus.APPROVED_BY_FINANCE:
        lines.append("فاکتور تایید نهایی شده و قابل تغییر نیست.")
    elif can_reject_or_delete(role, factor.status):
        lines.append("همچنین امکان رد یا حذف فاکتور نیز وجود دارد.")
    return " ".join(lines)


def build_view(factor: Factor, role: ActorRole) -> WorkflowView:
    return WorkflowView(
        badge=StatusBadge.for_status(factor.status),
        editable=factor.is_editable,
        actions=available_actions(factor, role),
        status_options=status_options(factor, role),
        guidance=guidance(factor, role)
    )
