"""
FastAPI dependencies wiring the storage port, the identity provider and the
services for one request.
"""

from typing import Iterator, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from supplier_gate.database.session import get_db_session
from supplier_gate.platform.identity_client import IdentityProviderClient, get_identity_client
from supplier_gate.services.admin_authorization import AdminAuthorizationService
from supplier_gate.services.eligibility_inspector import EligibilityInspector
from supplier_gate.services.migration_metrics import MigrationMetricsService
from supplier_gate.services.rate_limit_metrics import RateLimitMetricsService
from supplier_gate.storage.port import SupplierGateStore
from supplier_gate.storage.sql_store import SqlSupplierGateStore
from supplier_gate.suppliers.eligibility import EligibilityEngine


def get_store(db: Session = Depends(get_db_session)) -> SupplierGateStore:
    return SqlSupplierGateStore(db)


def get_identity_provider() -> Iterator[Optional[IdentityProviderClient]]:
    client = get_identity_client()
    try:
        yield client
    finally:
        if client is not None:
            client.close()


def get_eligibility_engine(store: SupplierGateStore = Depends(get_store)) -> EligibilityEngine:
    return EligibilityEngine(store)


def get_admin_authorizer(
    store: SupplierGateStore = Depends(get_store),
    identity_client: Optional[IdentityProviderClient] = Depends(get_identity_provider),
) -> AdminAuthorizationService:
    return AdminAuthorizationService(store, identity_client)


def get_inspector(
    store: SupplierGateStore = Depends(get_store),
    authorizer: AdminAuthorizationService = Depends(get_admin_authorizer),
    engine: EligibilityEngine = Depends(get_eligibility_engine),
) -> EligibilityInspector:
    return EligibilityInspector(store, authorizer, engine=engine)


def get_rate_limit_metrics_service(
    store: SupplierGateStore = Depends(get_store),
    authorizer: AdminAuthorizationService = Depends(get_admin_authorizer),
) -> RateLimitMetricsService:
    return RateLimitMetricsService(store, authorizer)


def get_migration_metrics_service(
    store: SupplierGateStore = Depends(get_store),
    authorizer: AdminAuthorizationService = Depends(get_admin_authorizer),
    engine: EligibilityEngine = Depends(get_eligibility_engine),
) -> MigrationMetricsService:
    return MigrationMetricsService(store, authorizer, engine=engine)
