"""
Group Gift Microservice API

Pooled gift contributions with invitation tracking and event-driven notifications.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from core.config import get_settings
from core.logger import setup_service_logger
from core.nats_client import get_event_bus

from .factory import create_group_gift_service
from .group_gift_service import GroupGiftService
from .models import (
    Contribution,
    ContributionRequest,
    ContributionStats,
    GroupGift,
    GroupGiftCreateRequest,
    GroupGiftStatus,
    GroupGiftSummary,
    GroupGiftUpdateRequest,
    HealthCheckResponse as HealthResponse,
    InviteContributorsRequest,
    Invitation,
)
from .protocols import (
    CampaignNotFoundError,
    DuplicateContributorError,
    GroupGiftServiceError,
    OverfundingError,
    RepositoryError,
    ValidationError,
)
from .routes_registry import SERVICE_METADATA

config = get_settings()

# Configure logging
logger = setup_service_logger("group_gift_service", level=config.logging.log_level)

# Global variables
group_gift_service: Optional[GroupGiftService] = None
repository = None
event_bus = None  # NATS event bus
SERVICE_PORT = config.service.service_port


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management"""
    global group_gift_service, repository, event_bus

    try:
        if config.infrastructure.nats_enabled:
            try:
                event_bus = await get_event_bus("group_gift_service", config=config.infrastructure)
                logger.info("Event bus initialized successfully")
            except Exception as e:
                logger.warning(f"Failed to initialize event bus: {e}. Continuing without notifications.")
                event_bus = None

        group_gift_service = create_group_gift_service(config=config, event_bus=event_bus)

        repository = group_gift_service.repository
        await repository.initialize()

        logger.info(f"Group gift service started on port {SERVICE_PORT}")
        yield

    except Exception as e:
        logger.error(f"Failed to initialize group gift service: {e}")
        raise
    finally:
        if event_bus:
            try:
                await event_bus.close()
                logger.info("Group gift event bus closed")
            except Exception as e:
                logger.error(f"Error closing event bus: {e}")

        if repository:
            await repository.close()
            logger.info("Group gift service storage closed")

        group_gift_service = None
        repository = None
        event_bus = None


# Create FastAPI application
app = FastAPI(
    title="Group Gift Service",
    description="Pooled gift contributions with invitation tracking",
    version=SERVICE_METADATA["version"],
    lifespan=lifespan,
)


# ====================
# Dependency Injection
# ====================


async def get_group_gift_service() -> GroupGiftService:
    """Get group gift service instance"""
    if not group_gift_service:
        raise HTTPException(status_code=503, detail="Group gift service not initialized")
    return group_gift_service


def _http_error(e: GroupGiftServiceError) -> HTTPException:
    """Map a domain error to its HTTP status"""
    if isinstance(e, ValidationError):
        return HTTPException(status_code=422, detail={"message": str(e), "errors": e.errors})
    if isinstance(e, CampaignNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, DuplicateContributorError):
        return HTTPException(status_code=409, detail={"message": str(e), "email": e.email})
    if isinstance(e, OverfundingError):
        return HTTPException(
            status_code=409,
            detail={"message": str(e), "remaining_amount": str(e.remaining_amount)},
        )
    if isinstance(e, RepositoryError):
        return HTTPException(status_code=503, detail=f"Storage unavailable: {e}")
    return HTTPException(status_code=500, detail=str(e))


# ====================
# Health Check
# ====================


@app.get("/api/v1/group-gifts/health", response_model=HealthResponse)
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health check"""
    dependencies = {}

    db = getattr(repository, "db", None)
    if db is not None:
        result = await db.health_check()
        dependencies["database"] = "healthy" if result and result.get("healthy") else "unhealthy"
    else:
        dependencies["database"] = "not_configured"

    if event_bus is not None:
        dependencies["event_bus"] = "healthy" if event_bus.is_connected else "unhealthy"
    else:
        dependencies["event_bus"] = "not_configured"

    status = "healthy" if all(v in ["healthy", "not_configured"] for v in dependencies.values()) else "degraded"

    return HealthResponse(
        status=status,
        service=SERVICE_METADATA["service_name"],
        port=SERVICE_PORT,
        version=SERVICE_METADATA["version"],
        dependencies=dependencies,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


# ====================
# Campaigns
# ====================


@app.post("/api/v1/group-gifts", response_model=GroupGift, status_code=201)
async def create_group_gift(
    request: GroupGiftCreateRequest,
    service: GroupGiftService = Depends(get_group_gift_service),
):
    """Start a group gift campaign"""
    try:
        return await service.create_group_gift(
            title=request.title,
            recipient_id=request.recipient_id,
            target_amount=request.target_amount,
            deadline=request.deadline,
            created_by=request.created_by,
            occasion_type=request.occasion_type,
            gift_id=request.gift_id,
            description=request.description,
            invited_contributors=request.invited_contributors,
        )
    except GroupGiftServiceError as e:
        raise _http_error(e)


@app.get("/api/v1/group-gifts", response_model=List[GroupGift])
async def list_group_gifts(
    status: Optional[GroupGiftStatus] = Query(None, description="Filter by status"),
    search: Optional[str] = Query(None, description="Search title and description"),
    recipient_id: Optional[int] = Query(None, description="Only campaigns for this recipient"),
    created_by: Optional[str] = Query(None, description="Only campaigns started by this creator"),
    service: GroupGiftService = Depends(get_group_gift_service),
):
    """List campaigns, newest first"""
    try:
        if recipient_id is not None:
            campaigns = await service.list_by_recipient(recipient_id)
        elif created_by is not None:
            campaigns = await service.list_by_creator(created_by)
        else:
            return await service.list_group_gifts(status=status, search=search)

        if status is not None:
            campaigns = [c for c in campaigns if c.status == status]
        return campaigns
    except GroupGiftServiceError as e:
        raise _http_error(e)


@app.get("/api/v1/group-gifts/stats", response_model=ContributionStats)
async def get_contribution_stats(service: GroupGiftService = Depends(get_group_gift_service)):
    """Contribution statistics across all campaigns"""
    try:
        return await service.get_contribution_stats()
    except GroupGiftServiceError as e:
        raise _http_error(e)


@app.get("/api/v1/group-gifts/{group_gift_id}", response_model=GroupGift)
async def get_group_gift(
    group_gift_id: int,
    service: GroupGiftService = Depends(get_group_gift_service),
):
    """Get campaign by ID"""
    try:
        return await service.get_group_gift(group_gift_id)
    except GroupGiftServiceError as e:
        raise _http_error(e)


@app.patch("/api/v1/group-gifts/{group_gift_id}", response_model=GroupGift)
async def update_group_gift(
    group_gift_id: int,
    request: GroupGiftUpdateRequest,
    service: GroupGiftService = Depends(get_group_gift_service),
):
    """Edit campaign display metadata"""
    try:
        return await service.update_group_gift(
            group_gift_id,
            title=request.title,
            description=request.description,
            occasion_type=request.occasion_type,
        )
    except GroupGiftServiceError as e:
        raise _http_error(e)


@app.delete("/api/v1/group-gifts/{group_gift_id}")
async def delete_group_gift(
    group_gift_id: int,
    service: GroupGiftService = Depends(get_group_gift_service),
):
    """Delete a campaign"""
    try:
        await service.delete_group_gift(group_gift_id)
        return {"success": True, "group_gift_id": group_gift_id}
    except GroupGiftServiceError as e:
        raise _http_error(e)


@app.get("/api/v1/group-gifts/{group_gift_id}/summary", response_model=GroupGiftSummary)
async def get_group_gift_summary(
    group_gift_id: int,
    service: GroupGiftService = Depends(get_group_gift_service),
):
    """Campaign progress summary"""
    try:
        return await service.get_group_gift_summary(group_gift_id)
    except GroupGiftServiceError as e:
        raise _http_error(e)


# ====================
# Contributions & Invitations
# ====================


@app.post(
    "/api/v1/group-gifts/{group_gift_id}/contributions",
    response_model=Contribution,
    status_code=201,
)
async def add_contribution(
    group_gift_id: int,
    request: ContributionRequest,
    service: GroupGiftService = Depends(get_group_gift_service),
):
    """Record a contribution"""
    try:
        return await service.add_contribution(
            group_gift_id,
            name=request.name,
            email=request.email,
            amount=request.amount,
            message=request.message,
        )
    except GroupGiftServiceError as e:
        raise _http_error(e)


@app.post("/api/v1/group-gifts/{group_gift_id}/invitations", response_model=List[Invitation])
async def invite_contributors(
    group_gift_id: int,
    request: InviteContributorsRequest,
    service: GroupGiftService = Depends(get_group_gift_service),
):
    """Invite contributors; returns only newly added invitations"""
    try:
        return await service.invite_contributors(group_gift_id, request.invitations)
    except GroupGiftServiceError as e:
        raise _http_error(e)


@app.delete("/api/v1/group-gifts/{group_gift_id}/invitations")
async def remove_invitation(
    group_gift_id: int,
    email: str = Query(..., description="Invitee email"),
    service: GroupGiftService = Depends(get_group_gift_service),
):
    """Remove a pending invitation"""
    try:
        removed = await service.remove_invitation(group_gift_id, email)
        return {"success": removed, "group_gift_id": group_gift_id, "email": email}
    except GroupGiftServiceError as e:
        raise _http_error(e)


# ====================
# Error Handling
# ====================


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(f"Unhandled exception in {request.url}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error occurred"})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "microservices.group_gift_service.main:app",
        host=config.service.service_host,
        port=SERVICE_PORT,
        reload=config.debug,
        log_level=config.logging.log_level.lower(),
    )
