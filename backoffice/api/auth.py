from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from backoffice.remote import remote
from backoffice.models.user import ActorRole, ROLE_DISPLAY_NAMES, User
from backoffice.tools.b2b_api import ApiError
from backoffice.tools.identity import identity_service

router = APIRouter(prefix="/api/auth", tags=["Auth"])

bearer_scheme = HTTPBearer(auto_error=False)

class LoginRequest(BaseModel):
    phone: str
    password: str

class OTPVerifyRequest(BaseModel):
    phone: str
    otp_code: str

class Session(BaseModel):
    auth_token: str
    user_id: str
    role: ActorRole
    role_name: str

async def _session_for(data: dict) -> Session:
    token = data.get("authToken")
    user_id = data.get("userId")
    if not token or user_id is None:
        raise HTTPException(status_code=502, detail="Identity service returned no session")

    role = await remote.users.get_role(str(user_id), token)
    return Session(auth_token=token, user_id=str(user_id), role=role, role_name=ROLE_DISPLAY_NAMES[role])

@router.post("/login", response_model=Session)
async def login(body: LoginRequest):
    try:
        data = await identity_service.login(body.phone, body.password)
    except ApiError as e:
        raise HTTPException(status_code=401, detail=e.message)
    return await _session_for(data)

@router.post("/otp/verify", response_model=Session)
async def verify_otp(body: OTPVerifyRequest):
    try:
        data = await identity_service.login_with_otp(body.phone, body.otp_code)
    except ApiError as e:
        raise HTTPException(status_code=401, detail=e.message)
    return await _session_for(data)

@router.post("/otp/{phone}", status_code=204)
async def request_otp(phone: str):
    try:
        await identity_service.generate_otp(phone)
    except ApiError as e:
        raise HTTPException(status_code=400, detail=e.message)

async def get_current_active_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    x_user_id: Optional[str] = Header(None)
) -> User:
    """
    Resolve the acting user from the bearer token and X-User-Id header.
    The role is looked up on every request so role changes apply immediately.
    """
    if credentials is None or not x_user_id:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"}
        )
    if not x_user_id.isdecimal():
        raise HTTPException(status_code=401, detail="Invalid user id")

    role = await remote.users.get_role(x_user_id, credentials.credentials)
    return User(user_id=x_user_id, token=credentials.credentials, role=role)

@router.get("/me", response_model=User)
async def read_me(current_user: User = Depends(get_current_active_user)):
    return current_user
