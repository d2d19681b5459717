"""
Unit tests for admin authorization.

Tests cover:
- Each of the three mechanisms grants access on its own
- Identity provider failures fall through
- Denial logging and error shape
"""

import logging
from unittest.mock import Mock

import pytest

from supplier_gate.platform.auth import AuthContext
from supplier_gate.platform.errors import AuthenticationError, PermissionDeniedError
from supplier_gate.platform.identity_client import IdentityProviderError
from supplier_gate.services.admin_authorization import AdminAuthorizationService
from supplier_gate.tests.factories import add_admin, add_user


@pytest.fixture
def identity_client():
    client = Mock()
    client.get_custom_claims.return_value = {}
    return client


class TestIsAdmin:

    def test_custom_claim_grants_admin(self, store, identity_client):
        identity_client.get_custom_claims.return_value = {"admin": True}

        assert AdminAuthorizationService(store, identity_client).is_admin("uid_1") is True

    def test_truthy_non_boolean_claim_does_not_grant(self, store, identity_client):
        identity_client.get_custom_claims.return_value = {"admin": "true"}

        assert AdminAuthorizationService(store, identity_client).is_admin("uid_1") is False

    def test_admins_row_grants_admin(self, db_session, store, identity_client):
        add_admin(db_session, "uid_1")

        assert AdminAuthorizationService(store, identity_client).is_admin("uid_1") is True

    def test_user_flag_grants_admin(self, db_session, store):
        add_user(db_session, "uid_1", is_admin=True)

        assert AdminAuthorizationService(store).is_admin("uid_1") is True

    @pytest.mark.parametrize("flag", [False, None])
    def test_user_without_flag_is_not_admin(self, db_session, store, flag):
        add_user(db_session, "uid_1", is_admin=flag)

        assert AdminAuthorizationService(store).is_admin("uid_1") is False

    def test_identity_provider_failure_falls_through(self, db_session, store, identity_client, caplog):
        identity_client.get_custom_claims.side_effect = IdentityProviderError("timeout")
        add_admin(db_session, "uid_1")

        with caplog.at_level(logging.WARNING):
            assert AdminAuthorizationService(store, identity_client).is_admin("uid_1") is True

        assert any(r.getMessage() == "admin_claim_lookup_failed" for r in caplog.records)

    def test_claim_short_circuits_storage(self, identity_client):
        store = Mock()
        identity_client.get_custom_claims.return_value = {"admin": True}

        assert AdminAuthorizationService(store, identity_client).is_admin("uid_1") is True
        store.admin_exists.assert_not_called()
        store.get_user.assert_not_called()

    def test_storage_failure_propagates(self):
        store = Mock()
        store.admin_exists.side_effect = ConnectionError("db down")

        with pytest.raises(ConnectionError):
            AdminAuthorizationService(store).is_admin("uid_1")


class TestRequireAdmin:

    def test_unauthenticated_is_authentication_error(self, store):
        with pytest.raises(AuthenticationError):
            AdminAuthorizationService(store).require_admin(None, action="inspect")

    def test_non_admin_is_permission_denied(self, store, caplog):
        auth = AuthContext(user_id="uid_9")

        with caplog.at_level(logging.WARNING):
            with pytest.raises(PermissionDeniedError) as exc_info:
                AdminAuthorizationService(store).require_admin(auth, action="inspect_supplier_eligibility")

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Admin access required"
        assert exc_info.value.details == {"user_message": "Acesso restrito a administradores"}

        denial = [r for r in caplog.records if r.getMessage() == "admin_access_denied"]
        assert len(denial) == 1
        assert denial[0].uid == "uid_9"
        assert denial[0].action == "inspect_supplier_eligibility"

    def test_admin_returns_context(self, db_session, store):
        add_admin(db_session, "uid_1")
        auth = AuthContext(user_id="uid_1")

        assert AdminAuthorizationService(store).require_admin(auth, action="inspect") is auth
