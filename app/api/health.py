from fastapi import APIRouter, Depends, Request
from datetime import datetime
from app.db.database import QueryGateway, get_gateway
from app.models.schemas import HealthResponse
from app.core.rate_limiter import health_rate_limit, limiter

router = APIRouter()


@router.get("/ping/", response_model=HealthResponse)
@limiter.limit(health_rate_limit)
def health_check(request: Request, gateway: QueryGateway = Depends(get_gateway)):
    """
    Health check endpoint
    """
    db_status = "ok" if gateway.check_connection() else "error"

    return HealthResponse(
        status="ok",
        database=db_status,
        timestamp=datetime.now()
    )
