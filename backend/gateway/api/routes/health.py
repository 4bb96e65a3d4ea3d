"""Health & Readiness Probes: liveness and readiness endpoints.

Invariants:
    - GET /health always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 unless MySQL, MongoDB and S3 all answer
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from gateway.api.docs import API_VERSION

router = APIRouter(prefix="/health", tags=["health"])

# app.state attribute -> name reported in the readiness payload
READINESS_CHECKS = {
    "db": "database",
    "documents": "document_store",
    "storage": "object_storage",
}


@router.get("", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "storegate",
        "version": API_VERSION,
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness probe: every backend client must answer its own health check."""
    checks = {}
    for attr, name in READINESS_CHECKS.items():
        backend = getattr(request.app.state, attr, None)
        ok = await backend.health_check() if backend else False
        checks[name] = "healthy" if ok else "unhealthy"

    failing = [name for name, state in checks.items() if state != "healthy"]
    if failing:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": f"{failing[0]}_unavailable",
                "checks": checks,
            },
        )
    return {"status": "ready", "checks": checks}
