import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from travelcrm.schemas.user import AuthSession
from travelcrm.services.crm_client import CRMClient, CRMClientError

BASE_URL = "http://crm.test/api"

LOGIN_PAYLOAD = {
    "id": 2,
    "name": "John Smith",
    "email": "john@company.com",
    "role": "employee",
    "department": "Sales",
    "token": "abc123",
    "token_type": "bearer",
    "expires_at": "2099-01-01T00:00:00+00:00",
}


def make_client(routes):
    """A client whose transport answers from ``routes`` keyed by (method, path)."""
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        route = routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"detail": "Not Found"})
        if isinstance(route, Exception):
            raise route
        return route

    client = CRMClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return client, requests


async def logged_in_client(routes):
    routes = {("POST", "/api/auth/login"): httpx.Response(200, json=LOGIN_PAYLOAD), **routes}
    client, requests = make_client(routes)
    await client.login("john@company.com", "emp123")
    return client, requests


class TestSession:
    async def test_login_keeps_session(self):
        client, requests = make_client({("POST", "/api/auth/login"): httpx.Response(200, json=LOGIN_PAYLOAD)})

        session = await client.login("john@company.com", "emp123")

        assert session.token == "abc123"
        assert session.user.name == "John Smith"
        assert json.loads(requests[0].content) == {"email": "john@company.com", "password": "emp123"}
        actor = client.actor()
        assert actor.id == "2"
        assert actor.role == "employee"
        await client.close()

    async def test_login_failure_returns_none(self):
        client, _ = make_client({("POST", "/api/auth/login"): httpx.Response(401, json={"detail": "Invalid"})})

        assert await client.login("john@company.com", "wrong") is None
        assert client.current_session() is None
        await client.close()

    async def test_login_network_error_returns_none(self):
        client, _ = make_client({("POST", "/api/auth/login"): httpx.ConnectError("refused")})

        assert await client.login("john@company.com", "emp123") is None
        await client.close()

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, text="<html>Sign in to the network</html>"),
            httpx.Response(200, json={"token": "abc123"}),
        ],
    )
    async def test_unexpected_login_body_returns_none(self, response):
        client, _ = make_client({("POST", "/api/auth/login"): response})

        assert await client.login("john@company.com", "emp123") is None
        assert client.current_session() is None
        await client.close()

    async def test_expired_session_is_cleared(self):
        client, _ = await logged_in_client({})

        later = datetime(2099, 1, 2, tzinfo=timezone.utc)
        assert client.current_session(now=later) is None
        assert client.session is None
        assert client.actor() is None
        await client.close()

    async def test_logout(self):
        client, _ = await logged_in_client({})

        client.logout()

        assert client.current_session() is None
        await client.close()

    def test_session_expiry_with_naive_times(self):
        session = AuthSession(
            user={"id": 1, "email": "a@b.c", "name": "A", "role": "admin", "is_active": True},
            token="t",
            expires_at=datetime(2024, 1, 1, 12, 0),
        )

        assert not session.is_expired(datetime(2024, 1, 1, 11, 0))
        assert session.is_expired(datetime(2024, 1, 1, 12, 0) + timedelta(seconds=1))
        assert session.actor().is_admin


class TestReads:
    async def test_get_customers_sends_bearer_token(self):
        customers = [{"id": 1, "name": "Alice"}]
        client, requests = await logged_in_client({("GET", "/api/customers"): httpx.Response(200, json=customers)})

        result = await client.get_customers({"customer_status": "active"})

        assert result == customers
        assert requests[-1].headers["Authorization"] == "Bearer abc123"
        assert requests[-1].url.params["customer_status"] == "active"
        await client.close()

    async def test_get_logs_path(self):
        client, requests = await logged_in_client(
            {("GET", "/api/customers/logs/all"): httpx.Response(200, json=[{"id": 5}])}
        )

        assert await client.get_logs() == [{"id": 5}]
        await client.close()

    async def test_server_error_reads_as_empty(self):
        client, _ = await logged_in_client({("GET", "/api/customers"): httpx.Response(500, text="boom")})

        assert await client.get_customers() == []
        await client.close()

    async def test_network_error_reads_as_empty(self):
        client, _ = await logged_in_client({("GET", "/api/users"): httpx.ReadTimeout("slow")})

        assert await client.get_users() == []
        await client.close()

    async def test_non_list_payload_reads_as_empty(self):
        client, _ = await logged_in_client({("GET", "/api/customers"): httpx.Response(200, json={"oops": 1})})

        assert await client.get_customers() == []
        await client.close()

    async def test_html_body_reads_as_empty(self):
        client, _ = await logged_in_client(
            {("GET", "/api/customers"): httpx.Response(200, text="<html>proxy</html>")}
        )

        assert await client.get_customers() == []
        await client.close()

    async def test_no_session_reads_as_empty_without_request(self):
        client, requests = make_client({("GET", "/api/customers"): httpx.Response(200, json=[{"id": 1}])})

        assert await client.get_customers() == []
        assert requests == []
        await client.close()


class TestWrites:
    async def test_save_new_customer_posts(self):
        created = {"id": 7, "name": "Alice"}
        client, requests = await logged_in_client({("POST", "/api/customers"): httpx.Response(201, json=created)})

        result = await client.save_customer({"name": "Alice", "created_at": None})

        assert result == created
        assert json.loads(requests[-1].content) == {"name": "Alice"}
        await client.close()

    async def test_save_existing_customer_puts(self):
        client, requests = await logged_in_client(
            {("PUT", "/api/customers/7"): httpx.Response(200, json={"id": 7, "name": "Alice B."})}
        )

        await client.save_customer({"id": 7, "name": "Alice B.", "created_by": 2})

        assert requests[-1].method == "PUT"
        assert json.loads(requests[-1].content) == {"name": "Alice B."}
        await client.close()

    async def test_delete_customer(self):
        client, requests = await logged_in_client({("DELETE", "/api/customers/7"): httpx.Response(204)})

        assert await client.delete_customer(7) is None
        assert requests[-1].method == "DELETE"
        await client.close()

    async def test_add_log(self):
        log = {"type": "call", "outcome": "positive"}
        client, requests = await logged_in_client(
            {("POST", "/api/customers/7/logs"): httpx.Response(201, json={"id": 1, **log})}
        )

        result = await client.add_log(7, log)

        assert result["id"] == 1
        await client.close()

    async def test_failed_write_raises_with_server_detail(self):
        client, _ = await logged_in_client(
            {("POST", "/api/customers"): httpx.Response(400, json={"detail": "This email is already registered"})}
        )

        with pytest.raises(CRMClientError, match="This email is already registered"):
            await client.save_customer({"name": "Alice", "email": "alice@example.com"})
        await client.close()

    async def test_write_network_error_raises(self):
        client, _ = await logged_in_client({("DELETE", "/api/customers/1"): httpx.ConnectError("down")})

        with pytest.raises(CRMClientError):
            await client.delete_customer(1)
        await client.close()

    async def test_html_write_response_raises(self):
        client, _ = await logged_in_client(
            {("POST", "/api/customers/7/logs"): httpx.Response(201, text="<html>proxy</html>")}
        )

        with pytest.raises(CRMClientError):
            await client.add_log(7, {"type": "note"})
        await client.close()

    async def test_write_without_session_raises(self):
        client, requests = make_client({})

        with pytest.raises(CRMClientError, match="Not authenticated"):
            await client.add_log(1, {"type": "note"})
        assert requests == []
        await client.close()
