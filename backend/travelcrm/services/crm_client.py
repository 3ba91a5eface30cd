import httpx
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, List

from travelcrm.config import get_settings
from travelcrm.schemas.user import Actor, AuthSession, UserResponse

logger = logging.getLogger(__name__)

SESSION_LIFETIME = timedelta(hours=24)


class CRMClientError(Exception):
    """A write against the CRM API failed."""


class CRMClient:
    """Client for the CRM REST API.

    Holds the login session locally. Reads degrade to empty results on any
    transport failure; writes raise :class:`CRMClientError`.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = get_settings()
        self.base_url = (base_url or self.settings.api_base_url).rstrip("/")
        self.session: Optional[AuthSession] = None
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.settings.request_timeout_seconds,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None

    # ==================== Session ====================

    async def login(self, email: str, password: str) -> Optional[AuthSession]:
        """Log in and keep the session. Returns None on bad credentials or errors."""
        client = await self.get_client()
        try:
            response = await client.post(
                f"{self.base_url}/auth/login",
                json={"email": email, "password": password},
            )
        except httpx.HTTPError as e:
            logger.error(f"HTTP error during login: {e}")
            return None

        if response.status_code != 200:
            logger.warning(f"Login failed for {email}: {response.status_code}")
            return None

        try:
            data = response.json()
            user = UserResponse(
                id=data["id"],
                email=data["email"],
                name=data["name"],
                role=data["role"],
                department=data.get("department"),
                is_active=True,
            )
            expires_at = data.get("expires_at") or (datetime.now(timezone.utc) + SESSION_LIFETIME)
            session = AuthSession(user=user, token=data["token"], expires_at=expires_at)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"Unexpected login response for {email}: {e}")
            return None

        self.session = session
        logger.info(f"Logged in as {user.email} ({user.role})")
        return self.session

    def logout(self):
        self.session = None

    def current_session(self, now: Optional[datetime] = None) -> Optional[AuthSession]:
        """The stored session, or None once it has expired (which also clears it)."""
        if self.session is None:
            return None
        if self.session.is_expired(now):
            logger.info("Session expired, clearing")
            self.session = None
            return None
        return self.session

    def actor(self, now: Optional[datetime] = None) -> Optional[Actor]:
        session = self.current_session(now)
        return session.actor() if session else None

    def _auth_headers(self) -> Optional[Dict[str, str]]:
        session = self.current_session()
        if session is None:
            return None
        return {"Authorization": f"Bearer {session.token}"}

    # ==================== Reads ====================

    async def _get_list(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        headers = self._auth_headers()
        if headers is None:
            logger.error(f"No auth token found, cannot fetch {endpoint}")
            return []

        client = await self.get_client()
        try:
            response = await client.get(f"{self.base_url}{endpoint}", headers=headers, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Error fetching {endpoint}: {e}")
            return []

        if response.is_error:
            logger.error(f"Failed to fetch {endpoint}: {response.status_code} {response.text}")
            return []

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from {endpoint}: {e}")
            return []

        if not isinstance(data, list):
            logger.error(f"Unexpected payload from {endpoint}: {type(data).__name__}")
            return []
        return data

    async def get_customers(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return await self._get_list("/customers", params)

    async def get_logs(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return await self._get_list("/customers/logs/all", params)

    async def get_users(self) -> List[Dict[str, Any]]:
        return await self._get_list("/users")

    # ==================== Writes ====================

    async def _write(self, method: str, endpoint: str, payload: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        headers = self._auth_headers()
        if headers is None:
            raise CRMClientError("Not authenticated")

        client = await self.get_client()
        try:
            response = await client.request(method, f"{self.base_url}{endpoint}", headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"HTTP error on {method} {endpoint}: {e}")
            raise CRMClientError(f"{method} {endpoint} failed") from e

        if response.is_error:
            detail = _error_detail(response)
            logger.error(f"{method} {endpoint} failed: {response.status_code} {detail}")
            raise CRMClientError(detail)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from {method} {endpoint}: {e}")
            raise CRMClientError(f"{method} {endpoint} returned an invalid response") from e

    async def save_customer(self, customer: Dict[str, Any]) -> Dict[str, Any]:
        """Create the customer, or replace it in full when it already has an id."""
        payload = {k: v for k, v in customer.items() if k not in ("id", "created_at", "updated_at", "created_by")}
        if customer.get("id"):
            return await self._write("PUT", f"/customers/{customer['id']}", payload)
        return await self._write("POST", "/customers", payload)

    async def delete_customer(self, customer_id: int) -> None:
        await self._write("DELETE", f"/customers/{customer_id}")

    async def add_log(self, customer_id: int, log: Dict[str, Any]) -> Dict[str, Any]:
        return await self._write("POST", f"/customers/{customer_id}/logs", log)


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict) and isinstance(body.get("detail"), str):
        return body["detail"]
    return f"HTTP {response.status_code}"


# Global client instance
_crm_client: Optional[CRMClient] = None


def get_crm_client() -> CRMClient:
    """Get or create the global CRM client instance."""
    global _crm_client
    if _crm_client is None:
        _crm_client = CRMClient()
    return _crm_client
