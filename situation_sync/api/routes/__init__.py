from situation_sync.api.routes.health import router as health_router
from situation_sync.api.routes.status import router as status_router
from situation_sync.api.routes.sync import router as sync_router

__all__ = ["health_router", "status_router", "sync_router"]
