import logging
from typing import Any, Dict

import httpx

from backoffice.config import settings
from backoffice.tools.b2b_api import ApiError

logger = logging.getLogger(__name__)

class IdentityService:
    """
    Phone/password and OTP login against the shared identity provider.
    Returns {"authToken": str, "userId": int, "redirectUri": str}.
    """
    def __init__(self, base_url: str = None, transport: httpx.AsyncBaseTransport = None):
        self.base_url = base_url or settings.AUTH_BASE_URL
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        return {"url": settings.AUTH_SITE_HEADER, "Content-Type": "application/json"}

    async def _call(self, method: str, endpoint: str, fallback: str, json_body: Dict[str, Any] = None) -> Dict[str, Any]:
        async with httpx.AsyncClient(base_url=self.base_url, timeout=settings.REQUEST_TIMEOUT, transport=self._transport) as client:
            try:
                resp = await client.request(method, endpoint, json=json_body, headers=self._headers())
            except httpx.HTTPError as e:
                logger.error(f"Identity service {endpoint} failed: {e}")
                raise ApiError(fallback) from e

        try:
            payload = resp.json() if resp.content else {}
        except ValueError:
            payload = {}

        if not resp.is_success:
            raise ApiError(payload.get("message") or fallback, status_code=resp.status_code)
        return payload

    async def login(self, phone: str, password: str) -> Dict[str, Any]:
        payload = await self._call("POST", "/login", "Login failed", {"phone": phone, "password": password})
        return payload.get("data", {})

    async def generate_otp(self, phone: str) -> None:
        await self._call("GET", f"/user/generateOtp/{phone}", "Failed to generate OTP")
        logger.info(f"OTP requested for {phone[-4:]}")

    async def login_with_otp(self, phone: str, otp_code: str) -> Dict[str, Any]:
        payload = await self._call("POST", "/loginOTP", "OTP verification failed", {"phone": phone, "otpCode": otp_code})
        return payload.get("data", {})

identity_service = IdentityService()
