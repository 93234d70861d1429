"""
Health Check Router - HR Assessment Scoring Engine
app/routers/health.py

Returns health status of the service and its Snowflake store with a REAL
connection check.
"""
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Dict
from datetime import datetime, timezone

from app.config import get_settings
from app.services.snowflake import get_snowflake_connection

router = APIRouter(tags=["Health"])



#  Schemas


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    dependencies: Dict[str, str]



#  Dependency Health Checks


async def check_snowflake() -> str:
    """Check Snowflake connection health."""
    settings = get_settings()
    if not settings.snowflake_configured:
        missing = []
        if not settings.SNOWFLAKE_ACCOUNT: missing.append("SNOWFLAKE_ACCOUNT")
        if not settings.SNOWFLAKE_USER: missing.append("SNOWFLAKE_USER")
        if not settings.SNOWFLAKE_PASSWORD: missing.append("SNOWFLAKE_PASSWORD")
        return f"unhealthy: Missing env vars: {', '.join(missing)}"

    try:
        conn = get_snowflake_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT CURRENT_USER(), CURRENT_ROLE()")
            result = cursor.fetchone()
            cursor.close()
        finally:
            conn.close()
        return f"healthy (User: {result[0]})"

    except Exception as e:
        error_msg = str(e)[:100] + "..." if len(str(e)) > 100 else str(e)
        return f"unhealthy: {error_msg}"



#  Main Health Check Route


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={
        200: {"description": "All dependencies healthy"},
        503: {"description": "One or more dependencies unhealthy"},
    },
    summary="Health check",
    description="Check health of all dependencies.",
)
async def health_check():
    """Check health of all dependencies."""
    dependencies = {
        "snowflake": await check_snowflake(),
    }

    all_healthy = all(v.startswith("healthy") for v in dependencies.values())

    response = HealthResponse(
        status="healthy" if all_healthy else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=get_settings().APP_VERSION,
        dependencies=dependencies,
    )

    if all_healthy:
        return response
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=response.model_dump(mode="json"),
    )
