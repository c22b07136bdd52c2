import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hiready.core import config
from hiready.core.logging_config import setup_logging

# ✅ Import All API Routes
from hiready.api.routes import archetypes, auth, health, hiready, interview, interview_plans, job_targets


# ============================================
# ✅ LOGGING
# ============================================

setup_logging(config.LOG_LEVEL)
logger = logging.getLogger(__name__)


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="Hiready API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Authorization", "Content-Type"],
)


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(archetypes.router)
app.include_router(job_targets.router)
app.include_router(interview_plans.router)
app.include_router(hiready.router)
app.include_router(interview.router)


# ============================================
# ✅ STARTUP
# ============================================

@app.on_event("startup")
def on_startup():
    if config.RUN_MIGRATIONS:
        from hiready.db.migrate import run_migrations
        run_migrations()
    else:
        from hiready.db.init_db import init_db
        init_db()
    logger.info("Hiready API started")


@app.get("/")
def root():
    return {"status": "Hiready API running"}
