from fastapi import APIRouter
from app.api.v1.endpoints import (
    auth, health, states, districts, ranges, battalions, modules, topics, sub_topics, questions,
    menus, sub_menus, roles, permissions, permission_handle, users, communications,
    performance_statistics, reports, dashboard,
)
from app.core.config import settings

api_router = APIRouter()

# Deep health checks (/health/live, /health/ready)
api_router.include_router(health.router)


@api_router.get("/health", tags=["Health"])
async def health_check():
    """Simple health check endpoint for load balancer"""
    return {"status": "healthy", "service": settings.APP_NAME}


api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])

# Geography
api_router.include_router(states.router, prefix="/states", tags=["States"])
api_router.include_router(districts.router, prefix="/districts", tags=["Districts"])
api_router.include_router(ranges.router, prefix="/ranges", tags=["Ranges"])
api_router.include_router(battalions.router, prefix="/battalions", tags=["Battalions"])

# Questionnaire
api_router.include_router(modules.router, prefix="/modules", tags=["Modules"])
api_router.include_router(topics.router, prefix="/topics", tags=["Topics"])
api_router.include_router(sub_topics.router, prefix="/sub-topics", tags=["Sub-topics"])
api_router.include_router(questions.router, prefix="/questions", tags=["Questions"])

# Navigation and access
api_router.include_router(menus.router, prefix="/menus", tags=["Menus"])
api_router.include_router(sub_menus.router, prefix="/sub-menus", tags=["Sub-menus"])
api_router.include_router(roles.router, prefix="/roles", tags=["Roles"])
api_router.include_router(permissions.router, prefix="/permissions", tags=["Permissions"])
api_router.include_router(permission_handle.router, prefix="/permission-handle", tags=["Permission Handle"])

api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(communications.router, prefix="/communications", tags=["Communications"])
api_router.include_router(
    performance_statistics.router, prefix="/performance-statistics", tags=["Performance Statistics"]
)
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
