"""Mounts every endpoint module under the API prefix."""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    admin_dashboard,
    admin_exam_configs,
    admin_increments,
    admin_settings,
    admin_taxonomy,
    admin_users,
    analytics,
    auth,
    exams,
    health,
    oauth,
    questions,
    users,
)

# (module, prefix, tag) for routers whose paths are relative to their prefix
_PREFIXED = (
    (auth, "/auth", "Auth"),
    (oauth, "/auth", "OAuth"),
    (users, "/users", "Users"),
    (questions, "/questions", "Questions"),
    (exams, "/exams", "Exams"),
    (analytics, "/analytics", "Analytics"),
)

# Modules that declare their own prefix and tags
_SELF_PREFIXED = (
    health,
    admin_dashboard,
    admin_users,
    admin_taxonomy,
    admin_exam_configs,
    admin_increments,
    admin_settings,
)

api_router = APIRouter()

for module, prefix, tag in _PREFIXED:
    api_router.include_router(module.router, prefix=prefix, tags=[tag])
for module in _SELF_PREFIXED:
    api_router.include_router(module.router)
