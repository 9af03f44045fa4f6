"""Unit tests for the authentication dependencies."""

from datetime import timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from inkpost.domain.roles import UserRole
from inkpost.domain.services.auth_service import claims_for
from inkpost.infrastructure.api.dependencies import (
    AdminUser,
    CurrentUser,
    OptionalUser,
    VerifiedUser,
    extract_bearer_token,
)


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        ("bearer abc", "abc"),
        ("Bearer   abc  ", "abc"),
        ("Bearer", None),
        ("Bearer ", None),
        ("Basic dXNlcjpwYXNz", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected


@pytest_asyncio.fixture
async def guarded_client(app):
    """Client for an app with extra routes behind each guard."""

    @app.get("/guarded/user")
    async def user_route(user: CurrentUser):
        return {"id": user.id}

    @app.get("/guarded/optional")
    async def optional_route(user: OptionalUser):
        return {"id": user.id if user else None}

    @app.get("/guarded/admin")
    async def admin_route(user: AdminUser):
        return {"id": user.id}

    @app.get("/guarded/verified")
    async def verified_route(user: VerifiedUser):
        return {"id": user.id}

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class TestCurrentUser:
    async def test_missing_header(self, guarded_client):
        response = await guarded_client.get("/guarded/user")

        assert response.status_code == 401
        assert response.json()["code"] == "authentication_required"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    async def test_valid_token(self, guarded_client, create_user, jwt_service):
        user = await create_user()
        token = jwt_service.create_access_token(claims_for(user))

        response = await guarded_client.get("/guarded/user", headers=bearer(token))

        assert response.status_code == 200
        assert response.json() == {"id": user.id}

    async def test_expired_token(self, guarded_client, create_user, jwt_service):
        user = await create_user()
        token = jwt_service.create_access_token(claims_for(user), timedelta(seconds=-1))

        response = await guarded_client.get("/guarded/user", headers=bearer(token))

        assert response.status_code == 401
        assert response.json()["code"] == "token_expired"
        assert response.json()["message"] == "Authentication token expired"

    async def test_refresh_token_not_accepted(self, guarded_client, create_user, jwt_service):
        user = await create_user()
        token = jwt_service.create_refresh_token(claims_for(user))

        response = await guarded_client.get("/guarded/user", headers=bearer(token))

        assert response.status_code == 401
        assert response.json()["code"] == "invalid_token"

    async def test_deleted_user(self, guarded_client, create_user, jwt_service, user_repo, db_session):
        user = await create_user()
        token = jwt_service.create_access_token(claims_for(user))
        await user_repo.delete(user.id)
        await db_session.commit()

        response = await guarded_client.get("/guarded/user", headers=bearer(token))

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid authentication token"


class TestOptionalUser:
    async def test_anonymous(self, guarded_client):
        response = await guarded_client.get("/guarded/optional")

        assert response.json() == {"id": None}

    async def test_bad_token_is_anonymous(self, guarded_client):
        response = await guarded_client.get("/guarded/optional", headers=bearer("garbage"))

        assert response.status_code == 200
        assert response.json() == {"id": None}


class TestRoleGuards:
    async def test_admin_required(self, guarded_client, create_user, jwt_service):
        user = await create_user()

        response = await guarded_client.get(
            "/guarded/admin", headers=bearer(jwt_service.create_access_token(claims_for(user)))
        )

        assert response.status_code == 403
        assert response.json() == {
            "error": "Forbidden",
            "message": "Admin access required",
            "code": "forbidden",
        }

    async def test_admin_allowed(self, guarded_client, create_user, jwt_service):
        admin = await create_user(role=UserRole.ADMIN)

        response = await guarded_client.get(
            "/guarded/admin", headers=bearer(jwt_service.create_access_token(claims_for(admin)))
        )

        assert response.status_code == 200

    async def test_verified_email_required(self, guarded_client, create_user, jwt_service):
        user = await create_user(verified=False)

        response = await guarded_client.get(
            "/guarded/verified", headers=bearer(jwt_service.create_access_token(claims_for(user)))
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Email verification required"

    async def test_verified_email_allowed(self, guarded_client, create_user, jwt_service):
        user = await create_user(verified=True)

        response = await guarded_client.get(
            "/guarded/verified", headers=bearer(jwt_service.create_access_token(claims_for(user)))
        )

        assert response.status_code == 200
