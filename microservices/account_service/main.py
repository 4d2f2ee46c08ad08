"""Account Service API with NATS Event Integration and PostgreSQL."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query

from core.config import get_settings
from core.logger import setup_service_logger
from core.nats_client import get_event_bus

from .account_service import AccountService
from .factory import create_account_service
from .models import (
    AccountPropertiesResponse,
    AccountPropertiesUpdateRequest,
    AccountSearchResponse,
    AccountServiceStatus,
    AccountUser,
    PropertyName,
    VerificationConfirmRequest,
)
from .protocols import AccountServiceError, InvalidArgumentError, InvalidScopeError
from .routes_registry import SERVICE_METADATA

config = get_settings()
setup_service_logger(config.service_name, config=config.logging)
logger = logging.getLogger(__name__)

event_bus = None
account_service: Optional[AccountService] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global event_bus, account_service

    # Initialize event bus for event-driven communication
    if config.nats_enabled:
        try:
            event_bus = await get_event_bus(config.service_name, config=config.infrastructure)
            logger.info("Event bus initialized successfully")
        except Exception as e:
            logger.warning(f"Failed to initialize event bus: {e}. Continuing without event publishing.")
            event_bus = None

    account_service = create_account_service(config=config, event_bus=event_bus)
    logger.info("Account service initialized with PostgreSQL")

    # Register event handlers
    if event_bus:
        try:
            from .events.handlers import get_event_handlers
            handler_map = get_event_handlers(account_service)

            for event_pattern, handler_func in handler_map.items():
                await event_bus.subscribe_to_events(
                    pattern=event_pattern,
                    handler=handler_func,
                    durable=f"{config.service_name}-{event_pattern.replace('.', '-')}",
                )
                logger.info(f"Subscribed to {event_pattern} events")

            logger.info(f"Event handlers registered successfully - Subscribed to {len(handler_map)} event types")
        except Exception as e:
            logger.error(f"Failed to register event handlers: {e}")

    logger.info("Account Service started")

    yield

    # Cleanup
    if event_bus:
        try:
            await event_bus.close()
            logger.info("Event bus closed")
        except Exception as e:
            logger.error(f"Error closing event bus: {e}")

    db = getattr(account_service.account_repo, "db", None) if account_service else None
    if db is not None:
        await db.close()

    logger.info("Account Service shutting down...")


app = FastAPI(title="account_service", version=SERVICE_METADATA["version"], lifespan=lifespan)


def get_account_service() -> AccountService:
    if account_service is None:
        raise HTTPException(status_code=503, detail="Account service not initialized")
    return account_service


@app.get("/health")
async def health():
    database_connected = False
    db = getattr(account_service.account_repo, "db", None) if account_service else None
    if db is not None:
        database_connected = (await db.health_check()).get("healthy", False)

    return AccountServiceStatus(
        service=SERVICE_METADATA["service_name"],
        port=config.port,
        version=SERVICE_METADATA["version"],
        database_connected=database_connected,
        timestamp=datetime.now(tz=timezone.utc),
    )


@app.get("/api/v1/accounts/search", response_model=AccountSearchResponse)
async def search_accounts(
    property_name: PropertyName = Query(..., alias="property"),
    values: List[str] = Query(...),
):
    service = get_account_service()
    try:
        matches = await service.search_users(property_name.value, values)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AccountSearchResponse(property_name=property_name, matches=matches)


@app.get("/api/v1/accounts/{user_id}/properties", response_model=AccountPropertiesResponse)
async def get_account_properties(user_id: str):
    service = get_account_service()
    properties = await service.get_user(user_id)
    return AccountPropertiesResponse(user_id=user_id, properties=properties)


@app.put("/api/v1/accounts/{user_id}/properties", response_model=AccountPropertiesResponse)
async def update_account_properties(
    user_id: str,
    request: AccountPropertiesUpdateRequest,
    strict: bool = Query(True, description="Reject invalid data instead of repairing it"),
):
    """
    Reconcile the submitted properties with the stored record.

    With strict=false invalid values are cleared and invalid scopes
    downgraded instead of rejected.
    """
    service = get_account_service()
    user = AccountUser(user_id=user_id, display_name=request.display_name, email=request.email)
    try:
        properties = await service.update_user(user, request.to_properties(), throw_on_data=strict)
    except (InvalidScopeError, InvalidArgumentError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AccountServiceError as e:
        logger.error(f"Failed to update account {user_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return AccountPropertiesResponse(user_id=user_id, properties=properties)


@app.post("/api/v1/accounts/{user_id}/verification", response_model=AccountPropertiesResponse)
async def confirm_property_verification(user_id: str, request: VerificationConfirmRequest):
    service = get_account_service()
    try:
        properties = await service.confirm_verification(user_id, request.property_name.value, request.token)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AccountPropertiesResponse(user_id=user_id, properties=properties)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.host, port=config.port)
