from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .database import engine, Base
from . import models  # noqa: F401  (registers the tables on Base)
from .routers import estimates, exports

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("steel_estimator")

# Create tables (handles new tables but won't add columns to existing ones)
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Steel Estimator",
    description="Structural steel, metal deck and miscellaneous steel estimating",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(estimates.router, prefix="/api")
app.include_router(exports.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "steel-estimator"}


logger.info("Steel Estimator API ready (database: %s)", settings.DATABASE_URL.split("://")[0])
