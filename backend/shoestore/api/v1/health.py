from fastapi import APIRouter
from fastapi.responses import JSONResponse
import asyncio
from datetime import datetime, timezone
import time
from typing import Dict, Any

from shoestore import __version__
from shoestore.core.config import settings
from shoestore.core.database import db_manager

router = APIRouter(prefix="/health", tags=["health"])

# Health check timeout (seconds)
HEALTH_CHECK_TIMEOUT = 5


async def run_with_timeout(coro, timeout: float, default: Dict[str, Any]) -> Dict[str, Any]:
    """Run a coroutine with timeout, return default on failure"""
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except asyncio.TimeoutError:
        return {**default, "status": "timeout", "message": f"Check timed out after {timeout}s"}
    except Exception as e:
        return {**default, "status": "error", "message": str(e)}


async def check_dynamodb() -> Dict[str, Any]:
    """Confirm the shoe product table is reachable"""
    start = time.perf_counter()
    try:
        client = db_manager.get_dynamodb_client()
        response = await asyncio.to_thread(
            client.describe_table, TableName=settings.SHOE_PRODUCTS_TABLE
        )
    except Exception as e:
        return {
            "status": "unhealthy",
            "message": f"DynamoDB connection failed: {e}",
            "table": settings.SHOE_PRODUCTS_TABLE
        }

    return {
        "status": "healthy",
        "table": settings.SHOE_PRODUCTS_TABLE,
        "table_status": response.get("Table", {}).get("TableStatus", "unknown"),
        "latency_ms": round((time.perf_counter() - start) * 1000, 2)
    }


@router.get("")
async def health_check():
    """Liveness probe"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "environment": settings.ENVIRONMENT
    }


@router.get("/detailed")
async def detailed_health_check():
    """Dependency checks: DynamoDB table and payment configuration"""
    checks = {
        "dynamodb": await run_with_timeout(
            check_dynamodb(),
            timeout=HEALTH_CHECK_TIMEOUT,
            default={"table": settings.SHOE_PRODUCTS_TABLE}
        ),
        "payments": {
            "status": "healthy" if settings.STRIPE_SECRET_KEY else "warning",
            "configured": bool(settings.STRIPE_SECRET_KEY)
        }
    }

    healthy = checks["dynamodb"]["status"] == "healthy"
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
            "environment": settings.ENVIRONMENT,
            "checks": checks
        }
    )
