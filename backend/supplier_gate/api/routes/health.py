from fastapi import APIRouter, Depends

from supplier_gate.database.session import get_db_session
from supplier_gate.platform.db_readiness import (
    REQUIRED_GATE_TABLES,
    check_required_tables,
)

router = APIRouter()


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/api/health/readiness")
async def readiness(db=Depends(get_db_session)):
    """Readiness probe that validates the tables the gate reads exist."""
    result = check_required_tables(db, REQUIRED_GATE_TABLES)
    return {
        "status": "ready" if result.ready else "not_ready",
        "checks": {
            "database": "ok",
            "gate_tables": {
                "required": result.checked_tables,
                "missing": result.missing_tables,
            },
        },
    }
