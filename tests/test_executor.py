import asyncio
import pytest
from unittest.mock import AsyncMock, patch

from backoffice.guardrails.permissions import FactorAction
from backoffice.models.factor import FactorStatus
from backoffice.models.user import ActorRole
from backoffice.tools.b2b_api import ApiError
from backoffice.workflow.errors import FactorNotFound, TransitionInProgress, TransitionNotPermitted
from backoffice.workflow.executor import TransitionExecutor

@pytest.mark.asyncio
async def test_manager_approves_created_factor(mock_remote, mock_notify, make_user, make_log, sample_factor):
    approved = sample_factor.model_copy(update={"status": FactorStatus.APPROVED_BY_MANAGER})
    mock_remote.factors.get = AsyncMock(side_effect=[sample_factor, approved])
    mock_remote.factors.update_status = AsyncMock()
    mock_remote.factor_logs.get_for_factor = AsyncMock(return_value=[
        make_log(FactorStatus.CREATED, 0),
        make_log(FactorStatus.APPROVED_BY_MANAGER, 5),
    ])

    executor = TransitionExecutor()
    manager = make_user(ActorRole.MANAGER)
    result = await executor.perform_action("f_100", FactorAction.APPROVE_BY_MANAGER, manager, confirmed=True)

    mock_remote.factors.update_status.assert_called_once_with(
        "f_100", FactorStatus.APPROVED_BY_MANAGER, "42", "tok-123"
    )
    assert result.executed is True
    assert result.previous_status == FactorStatus.CREATED
    assert result.factor.status == FactorStatus.APPROVED_BY_MANAGER
    assert result.log_entry.status.value == "approved_by_manager"
    mock_notify.notify_status_change.assert_called_once_with(
        sample_factor, FactorStatus.CREATED, FactorStatus.APPROVED_BY_MANAGER
    )

@pytest.mark.asyncio
async def test_unconfirmed_transition_is_noop(mock_remote, make_user):
    executor = TransitionExecutor()
    result = await executor.transition("f_100", FactorStatus.DELETED, make_user(ActorRole.MANAGER), confirmed=False)

    assert result.executed is False
    assert result.target_status == FactorStatus.DELETED
    mock_remote.factors.get.assert_not_called()
    mock_remote.factors.update_status.assert_not_called()

@pytest.mark.asyncio
async def test_permission_rechecked_on_fresh_state(mock_remote, make_user, sample_factor):
    # Rendered at APPROVED_BY_MANAGER, but someone finalized it in the meantime
    finalized = sample_factor.model_copy(update={"status": FactorStatus.APPROVED_BY_FINANCE})
    mock_remote.factors.get = AsyncMock(return_value=finalized)
    mock_remote.factors.update_status = AsyncMock()

    executor = TransitionExecutor()
    with pytest.raises(TransitionNotPermitted) as exc:
        await executor.perform_action("f_100", FactorAction.REJECT, make_user(ActorRole.SALEMANAGER), confirmed=True)

    assert exc.value.message == "not permitted"
    mock_remote.factors.update_status.assert_not_called()

@pytest.mark.asyncio
async def test_status_picker_honors_graph(mock_remote, make_user, sample_factor):
    mock_remote.factors.get = AsyncMock(return_value=sample_factor)
    mock_remote.factors.update_status = AsyncMock()

    executor = TransitionExecutor()
    # Finance manager may not finalize a factor a manager has not approved
    with pytest.raises(TransitionNotPermitted):
        await executor.transition("f_100", FactorStatus.APPROVED_BY_FINANCE, make_user(ActorRole.FINANCEMANAGER), confirmed=True)
    mock_remote.factors.update_status.assert_not_called()

@pytest.mark.asyncio
async def test_sale_manager_approves_only_through_button(mock_remote, mock_notify, make_user, make_log, sample_factor):
    approved = sample_factor.model_copy(update={"status": FactorStatus.APPROVED_BY_MANAGER})
    mock_remote.factors.get = AsyncMock(side_effect=[sample_factor, sample_factor, approved])
    mock_remote.factors.update_status = AsyncMock()
    mock_remote.factor_logs.get_for_factor = AsyncMock(return_value=[make_log(FactorStatus.APPROVED_BY_MANAGER)])

    executor = TransitionExecutor()
    sale_manager = make_user(ActorRole.SALEMANAGER)

    # The picker is bound to the transition graph, which never grants this move
    with pytest.raises(TransitionNotPermitted):
        await executor.transition("f_100", FactorStatus.APPROVED_BY_MANAGER, sale_manager, confirmed=True)
    mock_remote.factors.update_status.assert_not_called()

    result = await executor.perform_action("f_100", FactorAction.APPROVE_BY_MANAGER, sale_manager, confirmed=True)
    assert result.executed is True
    mock_remote.factors.update_status.assert_called_once_with(
        "f_100", FactorStatus.APPROVED_BY_MANAGER, "42", "tok-123"
    )

@pytest.mark.asyncio
async def test_api_failure_leaves_state_unchanged(mock_remote, mock_notify, make_user, sample_factor):
    mock_remote.factors.get = AsyncMock(return_value=sample_factor)
    mock_remote.factors.update_status = AsyncMock(side_effect=ApiError("Factor is locked", status_code=400))
    mock_remote.factor_logs.get_for_factor = AsyncMock()

    executor = TransitionExecutor()
    with pytest.raises(ApiError) as exc:
        await executor.perform_action("f_100", FactorAction.DELETE, make_user(ActorRole.MANAGER), confirmed=True)

    assert exc.value.message == "Factor is locked"
    assert sample_factor.status == FactorStatus.CREATED
    # No refresh, no log read, no notification
    assert mock_remote.factors.get.call_count == 1
    mock_remote.factor_logs.get_for_factor.assert_not_called()
    mock_notify.notify_status_change.assert_not_called()
    assert not executor.is_in_flight("f_100")

@pytest.mark.asyncio
async def test_missing_factor(mock_remote, make_user):
    mock_remote.factors.get = AsyncMock(return_value=None)
    executor = TransitionExecutor()
    with pytest.raises(FactorNotFound):
        await executor.transition("nope", FactorStatus.CANCELED, make_user(ActorRole.MANAGER), confirmed=True)

@pytest.mark.asyncio
async def test_duplicate_submission_rejected(mock_remote, mock_notify, make_user, make_log, sample_factor):
    release = asyncio.Event()

    async def slow_update(*args, **kwargs):
        await release.wait()

    mock_remote.factors.get = AsyncMock(return_value=sample_factor)
    mock_remote.factors.update_status = AsyncMock(side_effect=slow_update)
    mock_remote.factor_logs.get_for_factor = AsyncMock(return_value=[make_log(FactorStatus.CANCELED)])

    executor = TransitionExecutor()
    manager = make_user(ActorRole.MANAGER)
    first = asyncio.create_task(executor.perform_action("f_100", FactorAction.REJECT, manager, confirmed=True))
    await asyncio.sleep(0)
    assert executor.is_in_flight("f_100")

    with pytest.raises(TransitionInProgress):
        await executor.perform_action("f_100", FactorAction.REJECT, manager, confirmed=True)

    release.set()
    result = await first
    assert result.executed is True
    assert mock_remote.factors.update_status.call_count == 1

@pytest.mark.asyncio
async def test_refresh_failure_still_reports_success(mock_remote, mock_notify, make_user, sample_factor):
    mock_remote.factors.get = AsyncMock(side_effect=[sample_factor, ApiError("HTTP error! status: 503", 503)])
    mock_remote.factors.update_status = AsyncMock()

    executor = TransitionExecutor()
    result = await executor.transition("f_100", FactorStatus.CANCELED, make_user(ActorRole.SALEMANAGER), confirmed=True)

    assert result.executed is True
    assert result.factor.status == FactorStatus.CANCELED
    assert result.log_entry is None
    # The input object is never mutated
    assert sample_factor.status == FactorStatus.CREATED
