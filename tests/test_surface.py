from backoffice.guardrails.permissions import FactorAction
from backoffice.models.factor import FACTOR_STATUS_COLORS, FACTOR_STATUS_DISPLAY_NAMES, FactorStatus
from backoffice.models.user import ActorRole
from backoffice.workflow.surface import available_actions, build_view, status_options

def _actions(factor, role):
    return [b.action for b in available_actions(factor, role)]

def test_manager_sees_approve_reject_delete_on_created(sample_factor):
    assert _actions(sample_factor, ActorRole.MANAGER) == [
        FactorAction.APPROVE_BY_MANAGER, FactorAction.REJECT, FactorAction.DELETE
    ]

def test_finalized_factor_renders_no_buttons(sample_factor):
    finalized = sample_factor.model_copy(update={"status": FactorStatus.APPROVED_BY_FINANCE})
    view = build_view(finalized, ActorRole.MANAGER)

    assert view.actions == []
    assert view.status_options == []
    assert view.editable is False
    assert "قابل تغییر نیست" in view.guidance

def test_sale_manager_after_manager_approval(sample_factor):
    approved = sample_factor.model_copy(update={"status": FactorStatus.APPROVED_BY_MANAGER})
    assert _actions(approved, ActorRole.SALEMANAGER) == [FactorAction.REJECT, FactorAction.DELETE]

def test_finance_manager_buttons(sample_factor):
    approved = sample_factor.model_copy(update={"status": FactorStatus.APPROVED_BY_MANAGER})
    buttons = available_actions(approved, ActorRole.FINANCEMANAGER)

    assert [b.action for b in buttons] == [FactorAction.APPROVE_BY_FINANCE, FactorAction.REJECT, FactorAction.DELETE]
    assert buttons[0].target_status == FactorStatus.APPROVED_BY_FINANCE
    assert all(b.requires_confirmation for b in buttons)

def test_button_targets_are_fixed(sample_factor):
    targets = {b.action: b.target_status for b in available_actions(sample_factor, ActorRole.MANAGER)}
    assert targets == {
        FactorAction.APPROVE_BY_MANAGER: FactorStatus.APPROVED_BY_MANAGER,
        FactorAction.REJECT: FactorStatus.CANCELED,
        FactorAction.DELETE: FactorStatus.DELETED,
    }

def test_marketer_sees_nothing(sample_factor):
    view = build_view(sample_factor, ActorRole.MARKETER)
    assert view.actions == []
    assert view.status_options == []
    assert view.editable is True

def test_status_picker_lists_legal_transitions(sample_factor):
    options = [o.status for o in status_options(sample_factor, ActorRole.MANAGER)]
    assert options == [FactorStatus.APPROVED_BY_MANAGER, FactorStatus.CANCELED, FactorStatus.DELETED]

def test_status_taxonomy_is_total():
    for status in FactorStatus:
        assert FACTOR_STATUS_DISPLAY_NAMES[status]
        assert FACTOR_STATUS_COLORS[status]

def test_badge(sample_factor):
    badge = build_view(sample_factor, ActorRole.MANAGER).badge
    assert badge.label == "ایجاد شده"
    assert badge.color == "bg-blue-100 text-blue-800"
