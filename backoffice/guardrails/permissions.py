from enum import Enum
from typing import FrozenSet
import logging
from backoffice.models.factor import Factor, FactorStatus
from backoffice.models.user import ActorRole, User

logger = logging.getLogger(__name__)

class FactorAction(str, Enum):
    APPROVE_BY_FINANCE = "approve_by_finance"
    APPROVE_BY_MANAGER = "approve_by_manager"
    REJECT = "reject"
    DELETE = "delete"

# Each workflow button moves the factor to exactly one status
ACTION_TARGETS = {
    FactorAction.APPROVE_BY_FINANCE: FactorStatus.APPROVED_BY_FINANCE,
    FactorAction.APPROVE_BY_MANAGER: FactorStatus.APPROVED_BY_MANAGER,
    FactorAction.REJECT: FactorStatus.CANCELED,
    FactorAction.DELETE: FactorStatus.DELETED,
}

STATUS_CHANGERS = frozenset({ActorRole.SALEMANAGER, ActorRole.FINANCEMANAGER, ActorRole.MANAGER})
MANAGER_APPROVERS = frozenset({ActorRole.SALEMANAGER, ActorRole.MANAGER})
FULL_LIST_VIEWERS = frozenset({ActorRole.MANAGER, ActorRole.DEVELOPER, ActorRole.FINANCEMANAGER, ActorRole.SALEMANAGER})
FULL_MENU_ROLES = frozenset({ActorRole.MANAGER, ActorRole.DEVELOPER, ActorRole.SALEMANAGER})
RESTRICTED_MENUS = frozenset({"configuration", "employees", "tags"})

# No transition of any kind leaves these states
FROZEN_STATUSES = frozenset({FactorStatus.APPROVED_BY_FINANCE, FactorStatus.DELETED})


def legal_transitions(role: ActorRole, current: FactorStatus) -> FrozenSet[FactorStatus]:
    """
    Statuses `role` may move a factor to from `current`.
    Rules are additive; the result is their union.
    """
    if current in FROZEN_STATUSES:
        return frozenset()

    allowed = set()

    if role == ActorRole.FINANCEMANAGER and current == FactorStatus.APPROVED_BY_MANAGER:
        allowed.add(FactorStatus.APPROVED_BY_FINANCE)

    # Not conditioned on the current status; the approve button is narrower (see can_approve_by_manager)
    if role == ActorRole.MANAGER:
        allowed.add(FactorStatus.APPROVED_BY_MANAGER)

    if role in STATUS_CHANGERS:
        if current != FactorStatus.CANCELED:
            allowed.add(FactorStatus.CANCELED)
        if current != FactorStatus.DELETED:
            allowed.add(FactorStatus.DELETED)

    return frozenset(allowed)


def can_approve_by_finance(role: ActorRole, current: FactorStatus) -> bool:
    return role == ActorRole.FINANCEMANAGER and current == FactorStatus.APPROVED_BY_MANAGER


def can_approve_by_manager(role: ActorRole, current: FactorStatus) -> bool:
    return role in MANAGER_APPROVERS and current == FactorStatus.CREATED


def can_reject_or_delete(role: ActorRole, current: FactorStatus) -> bool:
    return role in STATUS_CHANGERS and current in (FactorStatus.CREATED, FactorStatus.APPROVED_BY_MANAGER)


ACTION_GATES = {
    FactorAction.APPROVE_BY_FINANCE: can_approve_by_finance,
    FactorAction.APPROVE_BY_MANAGER: can_approve_by_manager,
    FactorAction.REJECT: can_reject_or_delete,
    FactorAction.DELETE: can_reject_or_delete,
}


def can_change_status(role: ActorRole) -> bool:
    """Whether the secondary status picker is shown at all."""
    return role in STATUS_CHANGERS


def can_view_all_factors(role: ActorRole) -> bool:
    return role in FULL_LIST_VIEWERS


def has_access_to_menu(role: ActorRole, menu_item: str) -> bool:
    if role in FULL_MENU_ROLES:
        return True
    if role == ActorRole.CUSTOMER:
        return False
    return menu_item not in RESTRICTED_MENUS


class PermissionChecker:
    def __init__(self):
        pass

    def check_transition(self, user: User, factor: Factor, target: FactorStatus) -> bool:
        """
        Role-based check against the transition graph.
        Callers run this immediately before executing, on a freshly read factor.
        """
        if target in legal_transitions(user.role, factor.status):
            return True

        logger.warning(
            f"User {user.user_id} ({user.role.value}) denied transition "
            f"{factor.status.value} -> {target.value} on factor {factor.id}"
        )
        return False

    def check_action(self, user: User, factor: Factor, action: FactorAction) -> bool:
        """Button-level check against the action's own gate."""
        if ACTION_GATES[action](user.role, factor.status):
            return True

        logger.warning(f"User {user.user_id} ({user.role.value}) denied action {action.value} on factor {factor.id}")
        return False

permission_checker = PermissionChecker()
