# app/routers/review.py

"""
Review routes.

List pending movements and the category catalog, and commit the
reviewer's decisions.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from app.core.errors import StoreError
from app.core.review import ReviewEngine
from app.dependencies import get_review_engine
from app.models import ReviewRequest

router = APIRouter()


# ============================================
# Pending movements
# ============================================

@router.get("/movements/pending")
async def list_pending_movements(
    expenses_only: bool = Query(True),
    engine: ReviewEngine = Depends(get_review_engine),
):
    """Unreviewed movements, oldest value date first."""
    try:
        movements = await engine.list_pending(expenses_only=expenses_only)
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return {
        "count": len(movements),
        "movements": [m.model_dump(mode="json") for m in movements],
    }


# ============================================
# Concept catalog
# ============================================

@router.get("/concepts")
async def list_concepts(engine: ReviewEngine = Depends(get_review_engine)):
    try:
        concepts = await engine.list_concepts()
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return {"concepts": [c.model_dump() for c in concepts]}


# ============================================
# Commit review
# ============================================

@router.post("/movements/review")
async def commit_review(
    request: ReviewRequest,
    expenses_only: bool = Query(True),
    engine: ReviewEngine = Depends(get_review_engine),
):
    """
    Mark movements reviewed and promote reviewed expenses to the ledger.

    Returns 200 when every eligible decision was applied, 409 when all of
    them were stale, and 207 otherwise.
    """
    try:
        result = await engine.commit(request.decisions, expenses_only=expenses_only)
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))

    attempted = result.reviewed + result.stale + result.failed
    if result.success:
        status_code = 200
    elif attempted and result.stale == attempted:
        status_code = 409
    else:
        status_code = 207

    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json"))
