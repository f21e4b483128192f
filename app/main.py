# app/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.database import (
    SupabaseConceptCatalog,
    SupabaseExpenseLedgerStore,
    SupabaseMovementStore,
    create_supabase_client,
)
from app.routers import health, upload, review

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ============================================
# Store wiring
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    client = create_supabase_client(settings)
    app.state.movement_store = SupabaseMovementStore(client, settings.movements_table)
    app.state.ledger_store = SupabaseExpenseLedgerStore(client, settings.ledger_table)
    app.state.concept_catalog = SupabaseConceptCatalog(client, settings.concepts_table)
    logger.info("Stores ready (%s)", settings.app_env)
    yield


# ============================================
# Create FastAPI app
# ============================================

app = FastAPI(
    title=settings.app_name,
    description="Bank statement ingestion and expense review",
    version="1.0.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# ============================================
# CORS middleware
# ============================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.frontend_url,
        "http://localhost:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================
# Include routers
# ============================================

app.include_router(health.router, tags=["Health"])
app.include_router(upload.router, prefix="/api", tags=["Upload"])
app.include_router(review.router, tags=["Review"])

# ============================================
# Root endpoint
# ============================================

@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs" if settings.debug else None,
    }
