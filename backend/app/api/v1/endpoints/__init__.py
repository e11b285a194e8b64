# API endpoints
from . import (
    auth, health, states, districts, ranges, battalions, modules, topics, sub_topics, questions,
    menus, sub_menus, roles, permissions, permission_handle, users, communications,
    performance_statistics, reports, dashboard,
)

__all__ = [
    "auth", "health", "states", "districts", "ranges", "battalions", "modules", "topics", "sub_topics",
    "questions", "menus", "sub_menus", "roles", "permissions", "permission_handle", "users",
    "communications", "performance_statistics", "reports", "dashboard",
]
