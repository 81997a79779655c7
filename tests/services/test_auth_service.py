"""
Tests for signup and password login
"""

from unittest.mock import AsyncMock, Mock, patch

import pytest

from cmdb.services.auth_service import AuthService
from cmdb.utils.exceptions import (
    ConflictError,
    InvalidCredentialsError,
    PendingApprovalError,
)
from cmdb.utils.security import decode_jwt_token


class TestAuthService:
    """Test signup approval, credential checks and token issuance"""

    @pytest.fixture
    def auth_service(self):
        service = AuthService()
        service.auto_approve = True
        return service

    @pytest.fixture
    def users_repo(self, mock_user):
        repo = Mock()
        repo.get_by_email = AsyncMock(return_value=None)
        repo.create = AsyncMock(return_value=mock_user)
        repo.update_profile = AsyncMock()
        repo.get_existing = AsyncMock(return_value=mock_user)
        repo.get_roles = AsyncMock(return_value=["admin"])
        with patch(
            "cmdb.services.auth_service.get_user_repository", return_value=repo
        ):
            yield repo

    @pytest.fixture(autouse=True)
    def fast_hashing(self):
        with patch(
            "cmdb.services.auth_service.hash_password", return_value="$2b$12$hashed"
        ):
            yield

    @pytest.mark.asyncio
    async def test_signup_approves_and_issues_token(
        self, auth_service, users_repo, mock_db_session, mock_user
    ):
        user, token = await auth_service.signup(
            db=mock_db_session, email="test@example.com", password="pw"
        )

        assert user is mock_user
        assert decode_jwt_token(token)["user_id"] == mock_user.id

        created = users_repo.create.await_args.kwargs
        assert created["username"] == "test@example.com"
        assert created["password_hash"] == "$2b$12$hashed"
        assert created["approved"] is False
        users_repo.update_profile.assert_awaited_once_with(mock_user.id, approved=True)
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_signup_keeps_explicit_username(
        self, auth_service, users_repo, mock_db_session
    ):
        await auth_service.signup(
            db=mock_db_session, email="a@example.com", password="pw", username="alice"
        )
        assert users_repo.create.await_args.kwargs["username"] == "alice"

    @pytest.mark.asyncio
    async def test_signup_pending_when_auto_approve_off(
        self, auth_service, users_repo, mock_db_session, mock_user
    ):
        auth_service.auto_approve = False
        mock_user.approved = False

        user, token = await auth_service.signup(
            db=mock_db_session, email="test@example.com", password="pw"
        )

        assert token is None
        users_repo.update_profile.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_signup_duplicate_email(
        self, auth_service, users_repo, mock_db_session, mock_user
    ):
        users_repo.get_by_email.return_value = mock_user

        with pytest.raises(ConflictError):
            await auth_service.signup(
                db=mock_db_session, email="test@example.com", password="pw"
            )
        users_repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_login_success(
        self, auth_service, users_repo, mock_db_session, mock_user
    ):
        users_repo.get_by_email.return_value = mock_user

        with patch("cmdb.services.auth_service.verify_password", return_value=True):
            user, token, roles = await auth_service.login(
                db=mock_db_session, email="test@example.com", password="pw"
            )

        assert user is mock_user
        assert roles == ["admin"]
        payload = decode_jwt_token(token)
        assert payload["email"] == "test@example.com"

    @pytest.mark.asyncio
    async def test_unknown_email_and_wrong_password_look_the_same(
        self, auth_service, users_repo, mock_db_session, mock_user
    ):
        with patch("cmdb.services.auth_service.verify_password", return_value=False):
            with pytest.raises(InvalidCredentialsError) as unknown:
                await auth_service.login(
                    db=mock_db_session, email="nobody@example.com", password="pw"
                )

            users_repo.get_by_email.return_value = mock_user
            with pytest.raises(InvalidCredentialsError) as wrong:
                await auth_service.login(
                    db=mock_db_session, email="test@example.com", password="bad"
                )

        assert str(unknown.value) == str(wrong.value) == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_login_unapproved(
        self, auth_service, users_repo, mock_db_session, mock_user
    ):
        mock_user.approved = False
        users_repo.get_by_email.return_value = mock_user

        with patch("cmdb.services.auth_service.verify_password", return_value=True):
            with pytest.raises(PendingApprovalError, match="pending approval"):
                await auth_service.login(
                    db=mock_db_session, email="test@example.com", password="pw"
                )

    @pytest.mark.asyncio
    async def test_unapproved_wrong_password_is_invalid_credentials(
        self, auth_service, users_repo, mock_db_session, mock_user
    ):
        mock_user.approved = False
        users_repo.get_by_email.return_value = mock_user

        with patch("cmdb.services.auth_service.verify_password", return_value=False):
            with pytest.raises(InvalidCredentialsError):
                await auth_service.login(
                    db=mock_db_session, email="test@example.com", password="bad"
                )
