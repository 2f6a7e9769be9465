from fastapi import APIRouter

from dataroom.api.endpoints import (
    auth,
    demo,
    nda,
    documents,
    access_requests,
    admin_auth,
    permissions,
    qa,
    company,
)
from dataroom.api.endpoints.admin import users as admin_users
from dataroom.api.endpoints.admin import access_requests as admin_access_requests
from dataroom.api.endpoints.admin import audit_logs as admin_audit_logs

api_router = APIRouter()

# Investor
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(demo.router, prefix="/demo", tags=["Demo"])
api_router.include_router(nda.router, prefix="/nda", tags=["NDA"])
api_router.include_router(documents.router, prefix="/documents", tags=["Documents"])
api_router.include_router(access_requests.router, prefix="/access-requests", tags=["Access Requests"])
api_router.include_router(qa.router, prefix="/qa", tags=["Q&A"])
api_router.include_router(company.router, prefix="/company", tags=["Company"])
api_router.include_router(permissions.router, prefix="/permissions", tags=["Permissions"])

# Admin
api_router.include_router(admin_auth.router, prefix="/admin-auth", tags=["Admin Auth"])
api_router.include_router(admin_users.router, prefix="/admin/users", tags=["Admin - Users"])
api_router.include_router(
    admin_access_requests.router, prefix="/admin/access-requests", tags=["Admin - Access Requests"]
)
api_router.include_router(admin_audit_logs.router, prefix="/admin/audit-logs", tags=["Admin - Audit Logs"])
