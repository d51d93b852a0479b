import logging

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ensport_backend.core.config import AUTO_SEED, CORS_ORIGINS, LOG_LEVEL, TEST_MODE
from ensport_backend.core.database import init_db, get_sync_session
from ensport_backend.core.errors import PortalError
from ensport_backend.core.rate_limit import rate_limit
from ensport_backend.seed.seed_all import seed_all

# --- Routers ---
from ensport_backend.core.auth import router as auth_router
from ensport_backend.routes.match_routes import router as match_router
from ensport_backend.routes.banner_routes import router as banner_router
from ensport_backend.routes.subscriber_routes import router as subscriber_router
from ensport_backend.routes.user_routes import router as user_router
from ensport_backend.routes.log_routes import router as log_router
from ensport_backend.routes.notification_routes import router as notification_router
from ensport_backend.routes.scheduler_routes import router as scheduler_router
from ensport_backend.routes.sport_routes import router as sport_router
from ensport_backend.routes.time_routes import router as time_router
from ensport_backend.routes.email_check_routes import router as email_check_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Every route shares the general per-address, per-path limit
app = FastAPI(title="EN Sport Alerts", dependencies=[Depends(rate_limit("general"))])

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.on_event("startup")
async def on_startup():
    # 1️⃣ Init DB tables async
    await init_db()

    # 2️⃣ Auto-seed sports and the first admin in sync mode
    if AUTO_SEED and not TEST_MODE:
        with get_sync_session() as session:
            seed_all(session)
    else:
        logger.info("Auto-seed disabled, skipping")


# Routers
app.include_router(auth_router, prefix="/auth", tags=["Auth"])
app.include_router(match_router, prefix="/matches", tags=["Matches"])
app.include_router(banner_router, prefix="/banner", tags=["Banners"])
app.include_router(subscriber_router, prefix="/subscribers", tags=["Subscribers"])
app.include_router(user_router, prefix="/admin/users", tags=["Users"])
app.include_router(log_router, prefix="/logs", tags=["Logs"])
app.include_router(notification_router, prefix="/notifications", tags=["Notifications"])
app.include_router(scheduler_router, prefix="/scheduler", tags=["Scheduler"])
app.include_router(sport_router, prefix="/sports", tags=["Sports"])
app.include_router(time_router, tags=["Time"])
app.include_router(email_check_router, prefix="/test", tags=["Email check"])
