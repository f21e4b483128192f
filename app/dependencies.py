# app/dependencies.py

"""
FastAPI dependencies.

The stores are built once by the application's lifespan and kept on
app.state; the pipeline and review engine are assembled per request from
them. Tests override these providers with in-memory stores.
"""

from fastapi import Depends, Request

from app.config import Settings, get_settings
from app.core.ingestion import IngestionPipeline
from app.core.review import ReviewEngine


def get_ingestion_pipeline(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> IngestionPipeline:
    return IngestionPipeline(request.app.state.movement_store, settings)


def get_review_engine(request: Request) -> ReviewEngine:
    state = request.app.state
    return ReviewEngine(
        state.movement_store,
        state.ledger_store,
        state.concept_catalog,
    )
