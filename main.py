import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clarity.core.config import Base, engine, settings
from clarity.core.exceptions import register_exception_handlers
from clarity.api.routers import analytics, coach, emas, export, sessions
import clarity.models  # noqa: F401  (registers tables on Base.metadata)

# =====================================================================
# LOGGING
# =====================================================================

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("clarity")

# =====================================================================
# CREATE APP
# =====================================================================

app = FastAPI(
    title=settings.APP_NAME,
    debug=settings.DEBUG,
    description="Cognitive training analytics API",
    version="1.0.0",
)

# =====================================================================
# CORS MIDDLEWARE - MUST BE FIRST!
# =====================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

logger.info("CORS allowed origins: %s", settings.CORS_ORIGINS)

register_exception_handlers(app)

# =====================================================================
# DATABASE INITIALIZATION
# =====================================================================

Base.metadata.create_all(bind=engine)

# =====================================================================
# HEALTH CHECK (before routers)
# =====================================================================


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# =====================================================================
# ROUTES
# =====================================================================

app.include_router(emas.router)
app.include_router(sessions.router)
app.include_router(analytics.router)
app.include_router(coach.router)
app.include_router(export.router)

# =====================================================================
# ROOT ENDPOINT
# =====================================================================


@app.get("/")
def root():
    """API root endpoint."""
    return {
        "message": "Welcome to Clarity API",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "emas": "/emas",
            "sessions": "/sessions",
            "analytics": "/analytics",
            "coach": "/coach",
            "export": "/export",
        },
    }
