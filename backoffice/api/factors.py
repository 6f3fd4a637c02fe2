from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response
from pydantic import BaseModel

from backoffice.config import settings
from backoffice.remote import remote
from backoffice.api.auth import get_current_active_user
from backoffice.guardrails.audit_logger import audit_logger, describe_entry
from backoffice.guardrails.decorators import require_menu, require_roles
from backoffice.guardrails.permissions import FactorAction, can_view_all_factors
from backoffice.models.audit import FactorLog
from backoffice.models.factor import Factor, FactorCreate, FactorFilter, FactorPage, FactorStatus, FactorUpdate, PaymentMethod, StatusBadge
from backoffice.models.user import ActorRole, User
from backoffice.tools.b2b_api import ApiError
from backoffice.utils.digits import to_english_digits
from backoffice.workflow.errors import FactorNotFound, FactorReadOnly, TransitionInProgress, TransitionNotPermitted, WorkflowError
from backoffice.workflow.executor import TransitionResult, transition_executor
from backoffice.workflow.naming import generate_factor_name
from backoffice.workflow.surface import WorkflowView, build_view

router = APIRouter(prefix="/api/factors", tags=["Factors"])

# Request / Response Models
class ConfirmRequest(BaseModel):
    confirmed: bool = False

class StatusChangeRequest(BaseModel):
    status: FactorStatus
    confirmed: bool = False

class FactorCreateRequest(BaseModel):
    customer_user_id: str
    customer_first_name: str
    customer_last_name: Optional[str] = None
    date: str
    payment_method: PaymentMethod = PaymentMethod.CASH
    orash_factor_id: Optional[str] = None
    tags: List[str] = []
    confirmed: bool = False

class FactorCreateResponse(BaseModel):
    created: bool
    name: str
    factor: Optional[Factor] = None
    workflow: Optional[WorkflowView] = None

class FactorDetail(BaseModel):
    factor: Factor
    workflow: WorkflowView

class FactorLogEntry(BaseModel):
    entry: FactorLog
    badge: StatusBadge
    description: str

ERROR_STATUS = {
    TransitionNotPermitted: 403,
    FactorNotFound: 404,
    TransitionInProgress: 409,
    FactorReadOnly: 409,
}

def _error(status_code: int, message: str) -> HTTPException:
    # The panel shows errors inline and clears them after `dismiss_after` seconds
    return HTTPException(
        status_code=status_code,
        detail={"message": message, "dismiss_after": settings.MESSAGE_DISMISS_SECONDS}
    )

def _workflow_error(e: WorkflowError) -> HTTPException:
    return _error(ERROR_STATUS.get(type(e), 400), e.message)

def _api_error(e: ApiError) -> HTTPException:
    # Upstream client errors keep their code; everything else is a bad gateway
    status_code = e.status_code if e.status_code and 400 <= e.status_code < 500 else 502
    return _error(status_code, e.message)

async def _load_factor(factor_id: str, user: User) -> Factor:
    try:
        factor = await remote.factors.get(factor_id, user.token)
    except ApiError as e:
        raise _api_error(e)
    if not factor:
        raise _workflow_error(FactorNotFound())
    return factor

@router.get("/", response_model=FactorPage)
async def list_factors(
    name: Optional[str] = None,
    status: Optional[FactorStatus] = None,
    payment_method: Optional[PaymentMethod] = Query(None, alias="paymentMethod"),
    orash_factor_id: Optional[str] = Query(None, alias="orashFactorId"),
    page_size: int = Query(10, alias="pageSize", ge=1, le=100),
    page_index: int = Query(0, alias="pageIndex", ge=0),
    current_user: User = Depends(require_menu("factors"))
):
    filter = FactorFilter(
        name=name.strip() if name and name.strip() else None,
        status=status,
        payment_method=payment_method,
        orash_factor_id=to_english_digits(orash_factor_id.strip()) if orash_factor_id and orash_factor_id.strip() else None
    )

    try:
        if can_view_all_factors(current_user.role):
            if filter.is_empty:
                items, count = await remote.factors.list(current_user.token, page_size, page_index)
            else:
                items, count = await remote.factors.filter(current_user.token, filter.to_api(), page_size, page_index)
        else:
            # Marketers only see factors of their related customers
            customer_ids = await remote.users.get_related_customer_ids(current_user.user_id, current_user.token)
            if not customer_ids:
                return FactorPage()
            filter.customer_user_ids = customer_ids
            items, count = await remote.factors.filter(current_user.token, filter.to_api(), page_size, page_index)
    except ApiError as e:
        raise _api_error(e)

    return FactorPage(items=items, count=count)

@router.post("/", response_model=FactorCreateResponse, status_code=201)
async def create_factor(
    body: FactorCreateRequest,
    response: Response,
    current_user: User = Depends(require_menu("factors"))
):
    try:
        available_tags = await remote.tags.list_all(current_user.token) if body.tags else []
        name = generate_factor_name(body.customer_first_name, body.customer_last_name, body.date, body.tags, available_tags)

        if not body.confirmed:
            # Preview only: the panel asks the user to confirm the generated name
            response.status_code = 200
            return FactorCreateResponse(created=False, name=name)

        payload = FactorCreate(
            name=name,
            date=body.date,
            customer_user_id=body.customer_user_id,
            creator_user_id=current_user.user_id,
            orash_factor_id=to_english_digits(body.orash_factor_id) if body.orash_factor_id else None,
            payment_method=body.payment_method,
            tags=body.tags
        )
        created = await remote.factors.create(payload.to_api(), current_user.token)
        if not created or created.get("id") is None:
            raise _error(502, "Factor was not created")
        factor = await remote.factors.get(str(created["id"]), current_user.token)
    except ApiError as e:
        raise _api_error(e)

    return FactorCreateResponse(created=True, name=name, factor=factor, workflow=build_view(factor, current_user.role))

@router.get("/{factor_id}", response_model=FactorDetail)
async def get_factor(factor_id: str, current_user: User = Depends(get_current_active_user)):
    factor = await _load_factor(factor_id, current_user)
    return FactorDetail(factor=factor, workflow=build_view(factor, current_user.role))

@router.put("/{factor_id}", response_model=FactorDetail)
async def update_factor(
    factor_id: str,
    body: FactorUpdate = Body(...),
    current_user: User = Depends(require_menu("factors"))
):
    factor = await _load_factor(factor_id, current_user)
    if not factor.is_editable:
        raise _workflow_error(FactorReadOnly())

    data = body.to_api()
    if body.orash_factor_id:
        data["orashFactorId"] = to_english_digits(body.orash_factor_id)
    # The API expects the unchanged status alongside descriptive edits
    data.update({"creatorUserId": current_user.user_id, "status": factor.status.value})

    try:
        await remote.factors.update(factor_id, data, current_user.token)
    except ApiError as e:
        raise _api_error(e)

    factor = await _load_factor(factor_id, current_user)
    return FactorDetail(factor=factor, workflow=build_view(factor, current_user.role))

@router.post("/{factor_id}/actions/{action}", response_model=TransitionResult)
async def perform_action(
    factor_id: str,
    action: FactorAction,
    body: Optional[ConfirmRequest] = None,
    current_user: User = Depends(get_current_active_user)
):
    confirmed = body.confirmed if body else False
    try:
        return await transition_executor.perform_action(factor_id, action, current_user, confirmed)
    except WorkflowError as e:
        raise _workflow_error(e)
    except ApiError as e:
        raise _api_error(e)

@router.post("/{factor_id}/status", response_model=TransitionResult)
async def change_status(
    factor_id: str,
    body: StatusChangeRequest,
    current_user: User = Depends(require_roles(ActorRole.SALEMANAGER, ActorRole.FINANCEMANAGER, ActorRole.MANAGER))
):
    try:
        return await transition_executor.transition(factor_id, body.status, current_user, body.confirmed)
    except WorkflowError as e:
        raise _workflow_error(e)
    except ApiError as e:
        raise _api_error(e)

@router.get("/{factor_id}/logs", response_model=List[FactorLogEntry])
async def get_factor_logs(factor_id: str, current_user: User = Depends(get_current_active_user)):
    try:
        trail = await audit_logger.get_audit_trail(factor_id, current_user.token)
    except ApiError as e:
        raise _api_error(e)
    return [
        FactorLogEntry(entry=entry, badge=StatusBadge.for_status(entry.status), description=describe_entry(entry))
        for entry in trail
    ]

@router.get("/{factor_id}/logs/report")
async def get_factor_log_report(
    factor_id: str,
    format: str = Query("PDF", pattern="(?i)^(pdf|json)$"),
    current_user: User = Depends(require_roles(
        ActorRole.MANAGER, ActorRole.DEVELOPER, ActorRole.FINANCEMANAGER, ActorRole.SALEMANAGER
    ))
):
    try:
        content = await audit_logger.generate_audit_report(factor_id, current_user.token, format)
    except ApiError as e:
        raise _api_error(e)

    if format.upper() == "PDF":
        return Response(content, media_type="application/pdf",
                        headers={"Content-Disposition": f'attachment; filename="factor_log_{factor_id}.pdf"'})
    return Response(content, media_type="application/json")
