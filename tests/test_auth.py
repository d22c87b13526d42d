from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from epharmacy.core.exceptions import ConflictError
from epharmacy.domain.auth.models import User
from epharmacy.domain.auth.repository import UserRepository
from epharmacy.core.security import create_access_token, get_password_hash, verify_password, verify_token


@pytest.mark.auth
@pytest.mark.integration
class TestAuthentication:
    """Test authentication endpoints and functionality."""

    async def test_register_user_success(self, client: AsyncClient) -> None:
        """Registration creates the account and logs it in."""
        user_data = {
            "username": "newuser",
            "email": "newuser@example.com",
            "password": "Password123",
            "full_name": "New User",
        }

        response = await client.post("/api/v1/auth/register", json=user_data)

        assert response.status_code == 201
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["user"]["username"] == "newuser"
        assert data["user"]["email"] == "newuser@example.com"
        assert data["user"]["is_admin"] is False
        assert "password" not in data["user"]
        assert "password_hash" not in data["user"]

        me = await client.get(
            "/api/v1/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"}
        )
        assert me.status_code == 200
        assert me.json()["username"] == "newuser"

    async def test_register_duplicate_username(self, client: AsyncClient, test_user: User) -> None:
        response = await client.post("/api/v1/auth/register", json={
            "username": "TestUser",
            "email": "different@example.com",
            "password": "Password123",
            "full_name": "Different User",
        })

        assert response.status_code == 409
        assert response.json()["message"] == "Username already taken"

    async def test_register_duplicate_email(self, client: AsyncClient, test_user: User) -> None:
        response = await client.post("/api/v1/auth/register", json={
            "username": "someoneelse",
            "email": test_user.email,
            "password": "Password123",
            "full_name": "Different User",
        })

        assert response.status_code == 409
        assert response.json()["message"] == "Email already in use"

    @pytest.mark.parametrize("field,value", [
        ("username", "ab"),
        ("username", "has space"),
        ("email", "not-an-email"),
        ("password", "short"),
    ])
    async def test_register_validation(self, client: AsyncClient, field: str, value: str) -> None:
        user_data = {
            "username": "validuser",
            "email": "valid@example.com",
            "password": "Password123",
            "full_name": "Valid User",
        }
        user_data[field] = value

        response = await client.post("/api/v1/auth/register", json=user_data)

        assert response.status_code == 422

    async def test_login_success(self, client: AsyncClient, test_user: User) -> None:
        response = await client.post("/api/v1/auth/login", json={
            "username": "testuser",
            "password": "testpassword123",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["expires_in"] > 0
        assert data["user"]["id"] == test_user.id

        payload = verify_token(data["access_token"], "access")
        assert payload["sub"] == str(test_user.id)
        assert payload["jti"]

    async def test_login_invalid_password(self, client: AsyncClient, test_user: User) -> None:
        response = await client.post("/api/v1/auth/login", json={
            "username": "testuser",
            "password": "wrongpassword",
        })

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    async def test_login_unknown_user(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/auth/login", json={
            "username": "nobody",
            "password": "whatever123",
        })

        assert response.status_code == 401
        assert response.json()["error_code"] == "AUTHENTICATION_ERROR"

    async def test_login_inactive_user(self, client: AsyncClient, db: AsyncSession, test_user: User) -> None:
        test_user.is_active = False
        await db.commit()

        response = await client.post("/api/v1/auth/login", json={
            "username": "testuser",
            "password": "testpassword123",
        })

        assert response.status_code == 403

    async def test_get_current_user(self, client: AsyncClient, user_headers: dict, test_user: User) -> None:
        response = await client.get("/api/v1/auth/me", headers=user_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == test_user.id
        assert data["full_name"] == "Test User"
        assert data["last_login_at"] is not None

    async def test_me_requires_token(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_me_rejects_garbage_token(self, client: AsyncClient) -> None:
        response = await client.get(
            "/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401

    async def test_token_without_session_is_rejected(self, client: AsyncClient, test_user: User) -> None:
        """A correctly signed token with no stored session does not authenticate."""
        token = create_access_token(str(test_user.id), {"username": test_user.username})

        response = await client.get(
            "/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401

    async def test_logout_revokes_token(self, client: AsyncClient, user_headers: dict) -> None:
        response = await client.post("/api/v1/auth/logout", headers=user_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Logged out successfully"

        response = await client.get("/api/v1/auth/me", headers=user_headers)
        assert response.status_code == 401

    async def test_logout_rejects_garbage_token(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/logout", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401

    async def test_logout_twice_is_rejected(self, client: AsyncClient, user_headers: dict) -> None:
        assert (await client.post("/api/v1/auth/logout", headers=user_headers)).status_code == 200

        response = await client.post("/api/v1/auth/logout", headers=user_headers)

        assert response.status_code == 401

    async def test_logout_requires_token(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/auth/logout")

        assert response.status_code == 401

    async def test_register_race_on_unique_username(self, client: AsyncClient, test_user: User) -> None:
        """Duplicate checks that miss a concurrent insert still end in a conflict."""
        with patch.object(UserRepository, "get_by_username", AsyncMock(return_value=None)), \
                patch.object(UserRepository, "get_by_email", AsyncMock(return_value=None)):
            response = await client.post("/api/v1/auth/register", json={
                "username": "testuser",
                "email": "test@example.com",
                "password": "Password123",
                "full_name": "Racing User",
            })

        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT_ERROR"

    async def test_repository_duplicate_insert_raises_conflict(self, db: AsyncSession, test_user: User) -> None:
        with pytest.raises(ConflictError):
            await UserRepository(db).create({
                "username": "testuser",
                "email": "another@example.com",
                "password": "Password123",
                "full_name": "Duplicate User",
            })

        assert await UserRepository(db).get_by_username("testuser") is not None

    async def test_logout_leaves_other_sessions(self, client: AsyncClient, user_headers: dict) -> None:
        second = await client.post("/api/v1/auth/login", json={
            "username": "testuser",
            "password": "testpassword123",
        })
        second_headers = {"Authorization": f"Bearer {second.json()['access_token']}"}

        await client.post("/api/v1/auth/logout", headers=user_headers)

        response = await client.get("/api/v1/auth/me", headers=second_headers)
        assert response.status_code == 200


@pytest.mark.auth
@pytest.mark.integration
class TestUserAccess:

    async def test_read_own_profile(self, client: AsyncClient, user_headers: dict, test_user: User) -> None:
        response = await client.get(f"/api/v1/users/{test_user.id}", headers=user_headers)

        assert response.status_code == 200
        assert response.json()["email"] == test_user.email

    async def test_read_other_profile_forbidden(
        self, client: AsyncClient, user_headers: dict, other_user: User
    ) -> None:
        response = await client.get(f"/api/v1/users/{other_user.id}", headers=user_headers)

        assert response.status_code == 403

    async def test_admin_reads_any_profile(
        self, client: AsyncClient, admin_headers: dict, test_user: User
    ) -> None:
        response = await client.get(f"/api/v1/users/{test_user.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["username"] == "testuser"

    async def test_admin_reads_missing_profile(self, client: AsyncClient, admin_headers: dict) -> None:
        response = await client.get("/api/v1/users/9999", headers=admin_headers)

        assert response.status_code == 404


@pytest.mark.unit
class TestPasswordSecurity:
    """Test password hashing and verification."""

    def test_password_hashing(self) -> None:
        password = "testpassword123"
        hashed = get_password_hash(password)

        assert hashed != password
        assert verify_password(password, hashed)
        assert not verify_password("wrongpassword", hashed)

    def test_password_hash_uniqueness(self) -> None:
        password = "testpassword123"

        assert get_password_hash(password) != get_password_hash(password)

    def test_user_model_password_helpers(self) -> None:
        user = User(username="model", email="model@example.com", full_name="Model User")
        user.set_password("modelpassword")

        assert user.password_hash != "modelpassword"
        assert user.verify_password("modelpassword")
        assert not user.verify_password("otherpassword")
