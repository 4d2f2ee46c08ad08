"""
Account Service Routes Registry

Defines all API routes and the service metadata.
Route metadata is centralized here and reported by the health endpoint.
"""

from typing import List, Dict, Any


# Route definitions for account_service
ACCOUNT_SERVICE_ROUTES = [
    # Health & Info endpoints
    {
        "path": "/health",
        "methods": ["GET"],
        "auth_required": False,
        "description": "Service health check"
    },

    # Account Properties
    {
        "path": "/api/v1/accounts/{user_id}/properties",
        "methods": ["GET", "PUT"],
        "auth_required": True,
        "description": "Read or reconcile account properties"
    },
    {
        "path": "/api/v1/accounts/{user_id}/verification",
        "methods": ["POST"],
        "auth_required": True,
        "description": "Confirm a pending property verification"
    },

    # Account Query
    {
        "path": "/api/v1/accounts/search",
        "methods": ["GET"],
        "auth_required": True,
        "description": "Find users by property value"
    },
]


def get_all_routes() -> List[Dict[str, Any]]:
    """
    Get all route definitions

    Returns:
        List of all route definitions
    """
    return ACCOUNT_SERVICE_ROUTES


# Service metadata
SERVICE_METADATA = {
    "service_name": "account_service",
    "version": "1.0.0",
    "tags": ["v1", "user-microservice", "account"],
    "capabilities": [
        "account_properties",
        "scope_management",
        "property_verification",
        "account_search",
    ]
}
