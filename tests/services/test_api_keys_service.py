"""
Tests for API key creation, lifecycle and verification
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, Mock, patch

import pytest

from cmdb.models.api_key_model import APIKey
from cmdb.services.api_keys_service import APIKeyService
from cmdb.utils.exceptions import InvalidAPIKeyError, NotFoundError, StorageError
from cmdb.utils.security import hash_api_key


def make_record(api_key: str, **overrides) -> APIKey:
    now = datetime.now(timezone.utc)
    values = {
        "id": "key123",
        "name": "agent",
        "key_hash": hash_api_key(api_key),
        "key_prefix": api_key[:12],
        "created_by": "admin1",
        "created_at": now,
        "last_used_at": None,
        "expires_at": None,
        "is_active": True,
    }
    values.update(overrides)
    return APIKey(**values)


class TestAPIKeyService:
    """Test API Key Management - generation, one-way storage, verification"""

    @pytest.fixture
    def api_key_service(self):
        return APIKeyService()

    @pytest.fixture
    def mock_repo(self):
        repo = Mock()
        repo.create = AsyncMock(
            side_effect=lambda **kwargs: APIKey(
                id="key123", created_at=datetime.now(timezone.utc), **kwargs
            )
        )
        repo.get_by_key_hash = AsyncMock(return_value=None)
        repo.touch = AsyncMock()
        repo.set_active = AsyncMock()
        repo.delete_by_id = AsyncMock()
        repo.list_keys = AsyncMock(return_value=[])
        with patch(
            "cmdb.services.api_keys_service.get_api_key_repository", return_value=repo
        ):
            yield repo

    @pytest.mark.asyncio
    async def test_create_api_key_success(
        self, api_key_service, mock_repo, mock_db_session
    ):
        """Raw key is returned once; only its hash and prefix are stored"""
        result = await api_key_service.create_api_key(
            db=mock_db_session, created_by="admin1", name="agent"
        )

        assert result.key.startswith("cmdb_")
        assert result.key_prefix == result.key[:12]
        assert result.record.key_prefix == result.key_prefix
        assert result.record.expires_at is None
        assert result.record.is_active is True

        stored = mock_repo.create.await_args.kwargs
        assert stored["key_hash"] == hash_api_key(result.key)
        assert result.key not in stored.values()
        assert "key_hash" not in result.record.model_dump()
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_api_key_generates_distinct_keys(
        self, api_key_service, mock_repo, mock_db_session
    ):
        first = await api_key_service.create_api_key(
            db=mock_db_session, created_by="admin1", name="a"
        )
        second = await api_key_service.create_api_key(
            db=mock_db_session, created_by="admin1", name="b"
        )
        assert first.key != second.key

    @pytest.mark.asyncio
    async def test_verify_created_key_returns_same_record(
        self, api_key_service, mock_repo, mock_db_session
    ):
        created = await api_key_service.create_api_key(
            db=mock_db_session, created_by="admin1", name="agent"
        )
        mock_repo.get_by_key_hash.return_value = make_record(created.key)

        info = await api_key_service.verify_api_key(
            db=mock_db_session, api_key=created.key
        )

        assert info.id == created.record.id
        assert info.key_prefix == created.key_prefix
        mock_repo.get_by_key_hash.assert_awaited_once_with(hash_api_key(created.key))
        mock_repo.touch.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("presented", [None, "", "cmdb_unknown", "not-a-key"])
    async def test_verify_unknown_key_fails_uniformly(
        self, api_key_service, mock_repo, mock_db_session, presented
    ):
        with pytest.raises(InvalidAPIKeyError, match="^Invalid API key$"):
            await api_key_service.verify_api_key(db=mock_db_session, api_key=presented)
        mock_repo.touch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_verify_inactive_key_fails(
        self, api_key_service, mock_repo, mock_db_session
    ):
        mock_repo.get_by_key_hash.return_value = make_record(
            "cmdb_abc", is_active=False
        )

        with pytest.raises(InvalidAPIKeyError, match="^Invalid API key$"):
            await api_key_service.verify_api_key(db=mock_db_session, api_key="cmdb_abc")
        mock_repo.touch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_verify_expired_key_fails(
        self, api_key_service, mock_repo, mock_db_session
    ):
        mock_repo.get_by_key_hash.return_value = make_record(
            "cmdb_abc", expires_at=datetime.now(timezone.utc) - timedelta(seconds=1)
        )

        with pytest.raises(InvalidAPIKeyError, match="^Invalid API key$"):
            await api_key_service.verify_api_key(db=mock_db_session, api_key="cmdb_abc")

    @pytest.mark.asyncio
    async def test_verify_naive_future_expiry_is_treated_as_utc(
        self, api_key_service, mock_repo, mock_db_session
    ):
        """SQLite hands back naive datetimes"""
        naive_future = datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(
            days=1
        )
        mock_repo.get_by_key_hash.return_value = make_record(
            "cmdb_abc", expires_at=naive_future
        )

        info = await api_key_service.verify_api_key(
            db=mock_db_session, api_key="cmdb_abc"
        )
        assert info.id == "key123"

    @pytest.mark.asyncio
    async def test_verify_survives_last_used_write_failure(
        self, api_key_service, mock_repo, mock_db_session
    ):
        """A failed last_used_at stamp is rolled back and does not fail the check"""
        mock_repo.get_by_key_hash.return_value = make_record("cmdb_abc")
        mock_repo.touch.side_effect = StorageError("touch api key: locked")

        info = await api_key_service.verify_api_key(
            db=mock_db_session, api_key="cmdb_abc"
        )

        assert info.id == "key123"
        mock_db_session.rollback.assert_awaited()

    @pytest.mark.asyncio
    async def test_set_status_unknown_key(
        self, api_key_service, mock_repo, mock_db_session
    ):
        mock_repo.set_active.side_effect = NotFoundError("API key not found")

        with pytest.raises(NotFoundError):
            await api_key_service.set_status(
                db=mock_db_session, key_id="missing", active=False
            )
        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_api_keys_hides_hashes(
        self, api_key_service, mock_repo, mock_db_session
    ):
        mock_repo.list_keys.return_value = [make_record("cmdb_abc")]

        keys = await api_key_service.list_api_keys(db=mock_db_session)

        assert len(keys) == 1
        assert "key_hash" not in keys[0].model_dump()
