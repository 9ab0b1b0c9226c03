"""
Unit tests for SqlAlchemyTenantDataRouter validation and provisioning rollback
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from src.adapter.services.tenant_router import SqlAlchemyTenantDataRouter
from src.app.services.tenant_router import InitialOwner
from src.domain.errors import (
    InvalidTenantIdentifier,
    ProvisioningFailed,
    ScopeUnavailable,
    TenantNotFound,
)

OWNER = InitialOwner(email="owner@acme.com", name="Owner", password_hash="x" * 60)


@pytest.fixture
def registry_sessions():
    return MagicMock()


@pytest.fixture
def storage():
    storage = MagicMock()
    storage.create = AsyncMock()
    storage.drop = AsyncMock()
    storage.attach = AsyncMock()
    return storage


@pytest.fixture
def router(registry_sessions, storage):
    return SqlAlchemyTenantDataRouter(registry_sessions, storage)


@pytest.mark.asyncio
@pytest.mark.parametrize("identifier", ["undefined", "null", "", "  ", "bad_slug", None])
async def test_resolve_rejects_before_any_lookup(router, registry_sessions, identifier):
    with pytest.raises(InvalidTenantIdentifier):
        await router.resolve(identifier)

    registry_sessions.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("scope_id", ["undefined", "db_undefined", "db_db_../etc", "acme"])
async def test_handles_for_rejects_malformed_scope(router, registry_sessions, storage, scope_id):
    with pytest.raises(InvalidTenantIdentifier):
        await router.handles_for(scope_id)

    registry_sessions.assert_not_called()
    storage.attach.assert_not_awaited()


@pytest.mark.asyncio
async def test_handles_for_failure_is_not_cached(router, storage):
    storage.attach = AsyncMock(side_effect=[OSError("disk gone"), MagicMock()])

    with patch.object(router, "_is_registered", AsyncMock(return_value=True)):
        with pytest.raises(ScopeUnavailable):
            await router.handles_for("db_acme_1a2b3c4d")

        handles = await router.handles_for("db_acme_1a2b3c4d")

    assert handles.scope_id == "db_acme_1a2b3c4d"
    assert storage.attach.await_count == 2


@pytest.mark.asyncio
async def test_provision_rolls_back_storage_and_registry(router, storage):
    """A failure after the storage exists drops it and removes the registry record"""
    delete_record = AsyncMock(return_value=True)

    with patch.object(router, "_is_registered", AsyncMock(return_value=True)), patch.object(
        router, "_delete_registry_record", delete_record
    ):
        storage.attach = AsyncMock(side_effect=OSError("cannot open"))

        with pytest.raises(ProvisioningFailed) as exc_info:
            await router.provision("db_acme_1a2b3c4d", OWNER)

    assert exc_info.value.code == "PROVISIONING_FAILED"
    assert isinstance(exc_info.value.__cause__, ScopeUnavailable)
    storage.drop.assert_awaited_once_with("db_acme_1a2b3c4d")
    delete_record.assert_awaited_once_with("db_acme_1a2b3c4d")


@pytest.mark.asyncio
async def test_provision_keeps_storage_it_did_not_create(router, storage):
    delete_record = AsyncMock(return_value=True)
    storage.create = AsyncMock(side_effect=FileExistsError("exists"))

    with patch.object(router, "_delete_registry_record", delete_record):
        with pytest.raises(ProvisioningFailed):
            await router.provision("db_acme_1a2b3c4d", OWNER)

    storage.drop.assert_not_awaited()
    delete_record.assert_awaited_once()


@pytest.mark.asyncio
async def test_provision_rollback_failures_are_logged_not_raised(router, storage, caplog):
    storage.attach = AsyncMock(side_effect=OSError("cannot open"))
    storage.drop = AsyncMock(side_effect=OSError("busy"))

    with patch.object(router, "_is_registered", AsyncMock(return_value=True)), patch.object(
        router, "_delete_registry_record", AsyncMock(side_effect=RuntimeError("registry down"))
    ):
        with pytest.raises(ProvisioningFailed):
            await router.provision("db_acme_1a2b3c4d", OWNER)

    assert "failed to drop storage" in caplog.text
    assert "failed to delete registry record" in caplog.text


@pytest.mark.asyncio
async def test_unknown_scopes_do_not_keep_locks(router, storage):
    with patch.object(router, "_is_registered", AsyncMock(return_value=False)):
        for n in range(3):
            with pytest.raises(TenantNotFound):
                await router.handles_for(f"db_ghost_0000000{n}")
        with pytest.raises(TenantNotFound):
            await router.destroy("db_ghost_00000000")

    assert router._locks == {}
    storage.attach.assert_not_awaited()


@pytest.mark.asyncio
async def test_provision_rollback_releases_lock(router, storage):
    storage.attach = AsyncMock(side_effect=OSError("cannot open"))

    with patch.object(router, "_is_registered", AsyncMock(return_value=True)), patch.object(
        router, "_delete_registry_record", AsyncMock(return_value=True)
    ):
        with pytest.raises(ProvisioningFailed):
            await router.provision("db_acme_1a2b3c4d", OWNER)

    assert "db_acme_1a2b3c4d" not in router._locks
    assert "db_acme_1a2b3c4d" not in router._handles
