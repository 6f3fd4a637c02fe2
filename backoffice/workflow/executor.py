import logging
from typing import Optional, Set

from pydantic import BaseModel

from backoffice.remote import remote
from backoffice.guardrails.audit_logger import audit_logger
from backoffice.guardrails.permissions import ACTION_TARGETS, FactorAction, permission_checker
from backoffice.models.audit import FactorLog
from backoffice.models.factor import Factor, FactorStatus
from backoffice.models.user import User
from backoffice.tools.b2b_api import ApiError
from backoffice.tools.notification_tool import notification_tool
from backoffice.workflow.errors import FactorNotFound, TransitionInProgress, TransitionNotPermitted

logger = logging.getLogger(__name__)

class TransitionResult(BaseModel):
    executed: bool
    target_status: FactorStatus
    previous_status: Optional[FactorStatus] = None
    factor: Optional[Factor] = None
    log_entry: Optional[FactorLog] = None

class TransitionExecutor:
    """
    Applies a status transition through the remote API.

    The status write and its factor-log entry are one server-side operation,
    so a failed call leaves both untouched. Callers must pass an explicit
    `confirmed` flag; an unconfirmed request is a no-op.
    """
    def __init__(self):
        # Factors with a transition awaiting the API in this process
        self._in_flight: Set[str] = set()

    def is_in_flight(self, factor_id: str) -> bool:
        return factor_id in self._in_flight

    async def perform_action(self, factor_id: str, action: FactorAction, actor: User, confirmed: bool) -> TransitionResult:
        """Run a workflow button: fixed target status, checked against the button's gate."""
        return await self._execute(factor_id, ACTION_TARGETS[action], actor, confirmed, action=action)

    async def transition(self, factor_id: str, target_status: FactorStatus, actor: User, confirmed: bool) -> TransitionResult:
        """Run a status-picker change, checked against the transition graph."""
        return await self._execute(factor_id, target_status, actor, confirmed)

    async def _execute(self, factor_id: str, target: FactorStatus, actor: User, confirmed: bool, action: FactorAction = None) -> TransitionResult:
        if not confirmed:
            logger.info(f"Transition of factor {factor_id} to {target.value} not confirmed, skipping")
            return TransitionResult(executed=False, target_status=target)

        if factor_id in self._in_flight:
            raise TransitionInProgress()

        self._in_flight.add(factor_id)
        try:
            # Re-read: the status may have moved since the action was rendered
            factor = await remote.factors.get(factor_id, actor.token)
            if not factor:
                raise FactorNotFound()

            if action is not None:
                allowed = permission_checker.check_action(actor, factor, action)
            else:
                allowed = permission_checker.check_transition(actor, factor, target)
            if not allowed:
                raise TransitionNotPermitted()

            await remote.factors.update_status(factor_id, target, actor.user_id, actor.token)
            audit_logger.log_state_transition(factor_id, factor.status, target, actor)

            refreshed, log_entry = await self._refresh(factor, target, actor)

            await notification_tool.notify_status_change(factor, factor.status, target)

            return TransitionResult(
                executed=True,
                target_status=target,
                previous_status=factor.status,
                factor=refreshed,
                log_entry=log_entry
            )
        finally:
            self._in_flight.discard(factor_id)

    async def _refresh(self, factor: Factor, target: FactorStatus, actor: User):
        """Re-fetch the factor and its newest log entry after a successful write."""
        try:
            refreshed = await remote.factors.get(factor.id, actor.token)
            log_entry = await audit_logger.get_latest_entry(factor.id, actor.token)
        except ApiError as e:
            # The write went through; report it with a locally derived copy
            logger.warning(f"Refresh after transition of factor {factor.id} failed: {e.message}")
            return factor.model_copy(update={"status": target}), None
        return refreshed, log_entry

transition_executor = TransitionExecutor()
