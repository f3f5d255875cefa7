"""
Group Gift Service Routes Registry
Defines all API routes exposed by the service.
"""

SERVICE_ROUTES = [
    # Health
    {
        "path": "/health",
        "methods": ["GET"],
        "auth_required": False,
        "description": "Basic health check endpoint"
    },
    {
        "path": "/api/v1/group-gifts/health",
        "methods": ["GET"],
        "auth_required": False,
        "description": "Service health check (API v1)"
    },
    # Campaigns
    {
        "path": "/api/v1/group-gifts",
        "methods": ["GET", "POST"],
        "auth_required": True,
        "description": "List campaigns (GET) or start a campaign (POST)"
    },
    {
        "path": "/api/v1/group-gifts/stats",
        "methods": ["GET"],
        "auth_required": True,
        "description": "Contribution statistics across all campaigns"
    },
    {
        "path": "/api/v1/group-gifts/{group_gift_id}",
        "methods": ["GET", "PATCH", "DELETE"],
        "auth_required": True,
        "description": "Get, edit display metadata of, or delete a campaign"
    },
    {
        "path": "/api/v1/group-gifts/{group_gift_id}/summary",
        "methods": ["GET"],
        "auth_required": True,
        "description": "Campaign progress summary"
    },
    # Contributions
    {
        "path": "/api/v1/group-gifts/{group_gift_id}/contributions",
        "methods": ["POST"],
        "auth_required": True,
        "description": "Record a contribution"
    },
    # Invitations
    {
        "path": "/api/v1/group-gifts/{group_gift_id}/invitations",
        "methods": ["POST", "DELETE"],
        "auth_required": True,
        "description": "Invite contributors (POST) or remove a pending invitation (DELETE)"
    },
]


# Service metadata
SERVICE_METADATA = {
    "service_name": "group_gift_service",
    "version": "1.0.0",
    "tags": ["v1", "group-gift", "contributions"],
    "capabilities": [
        "group_gift_campaigns",
        "contribution_ledger",
        "contributor_invitations",
        "campaign_summaries",
        "contribution_stats",
        "event_driven"
    ]
}
