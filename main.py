import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from config import CORS_ORIGINS, LOG_LEVEL, SCHEDULER_ENABLED
from database import check_connection
from routers import invoices_router, leases_router, notifications_router, payments_router
from workers.scheduler import shutdown_scheduler, start_scheduler

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if SCHEDULER_ENABLED:
        start_scheduler()
    yield
    shutdown_scheduler()


# App instance
app = FastAPI(title="IKHAYA Rent Properties API", lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(leases_router)
app.include_router(invoices_router)
app.include_router(payments_router)
app.include_router(notifications_router)


@app.get("/health")
def health():
    if check_connection():
        return {"status": "ok", "database": "connected"}
    return JSONResponse(status_code=503, content={"status": "error", "database": "unavailable"})


# Catch-all for unhandled errors
@app.middleware("http")
async def error_middleware(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


if __name__ == "__main__":
    port = int(os.getenv("PORT", 10000))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
