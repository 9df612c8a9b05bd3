from fastapi import APIRouter

from portal.api.routes import auth, admin_auth, admin, me, events, access_hubs, dashboard, content

api_router = APIRouter()

# 🔓 Public / member-auth routes
api_router.include_router(auth.router)
api_router.include_router(me.router)
api_router.include_router(dashboard.router)

# Registration paths must precede the /{item_id} detail routes
api_router.include_router(events.router)
api_router.include_router(access_hubs.router)
for content_router in content.routers:
    api_router.include_router(content_router)

# 🔒 Admin-only routes
api_router.include_router(admin_auth.router)
api_router.include_router(admin.router)
