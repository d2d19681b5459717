"""
Admin authorization for the diagnostic and reporting endpoints.

SECURITY CRITICAL:
- A caller is an administrator if ANY of these holds, checked in order:
    1. Identity provider custom claim admin == True
    2. A row in the admins table keyed by the caller ID
    3. users.is_admin == True for the caller
- Identity provider failures never grant access; the next mechanism runs
- Storage failures propagate; they never grant or deny access silently
- Every denial is logged with the caller ID and attempted action

Usage:
    authorizer = AdminAuthorizationService(store, identity_client)
    authorizer.require_admin(auth, action="inspect_supplier_eligibility")
"""

import logging
from typing import Optional

from supplier_gate.platform.audit import (
    AuditAction,
    AuditEvent,
    AuditOutcome,
    emit_audit_event,
)
from supplier_gate.platform.auth import AuthContext
from supplier_gate.platform.errors import AuthenticationError, PermissionDeniedError
from supplier_gate.platform.identity_client import IdentityProviderClient, IdentityProviderError
from supplier_gate.storage.port import SupplierGateStore

logger = logging.getLogger(__name__)

ADMIN_REQUIRED_MESSAGE = "Admin access required"
ADMIN_REQUIRED_USER_MESSAGE = "Acesso restrito a administradores"


class AdminAuthorizationService:
    """Resolves administrator privilege for an authenticated caller."""

    def __init__(
        self,
        store: SupplierGateStore,
        identity_client: Optional[IdentityProviderClient] = None,
    ):
        self.store = store
        self.identity_client = identity_client

    def _has_admin_claim(self, uid: str) -> bool:
        if self.identity_client is None:
            return False
        try:
            claims = self.identity_client.get_custom_claims(uid)
        except IdentityProviderError as e:
            logger.warning(
                "admin_claim_lookup_failed",
                extra={"uid": uid, "error": str(e)},
            )
            return False
        return claims.get("admin") is True

    def is_admin(self, uid: str) -> bool:
        """
        Check whether a user is an administrator.

        Args:
            uid: Caller ID

        Returns:
            True if any of the three mechanisms grants admin
        """
        if self._has_admin_claim(uid):
            return True

        if self.store.admin_exists(uid):
            return True

        user = self.store.get_user(uid)
        return user is not None and user.get("isAdmin") is True

    def require_admin(self, auth: Optional[AuthContext], action: str) -> AuthContext:
        """
        Require an authenticated administrator.

        Raises:
            AuthenticationError: If there is no authenticated caller
            PermissionDeniedError: If the caller is not an administrator
        """
        if auth is None:
            raise AuthenticationError()

        if not self.is_admin(auth.user_id):
            logger.warning(
                "admin_access_denied",
                extra={"uid": auth.user_id, "action": action},
            )
            emit_audit_event(AuditEvent(
                action=AuditAction.ADMIN_ACCESS_DENIED,
                user_id=auth.user_id,
                outcome=AuditOutcome.DENIED,
                error_code="PERMISSION_DENIED",
                metadata={"attempted_action": action},
            ))
            raise PermissionDeniedError(
                ADMIN_REQUIRED_MESSAGE,
                details={"user_message": ADMIN_REQUIRED_USER_MESSAGE},
            )

        return auth
