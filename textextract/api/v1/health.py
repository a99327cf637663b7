import asyncio

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from textextract.core.database import get_async_session
from textextract.dependencies import get_ocr_worker
from textextract.services.extraction.ocr_worker import OCRWorker

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    return {"status": "healthy", "service": "textextract"}


@router.get("/health/ready")
async def readiness_check(
    db: AsyncSession = Depends(get_async_session),
    worker: OCRWorker = Depends(get_ocr_worker),
):
    checks = {}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "connected"
    except Exception as e:
        checks["database"] = f"error: {str(e)}"

    try:
        await asyncio.to_thread(worker.start)
        checks["tesseract"] = "available"
    except Exception as e:
        checks["tesseract"] = f"error: {str(e)}"

    all_healthy = checks["database"] == "connected" and checks["tesseract"] == "available"
    return {
        "status": "ready" if all_healthy else "degraded",
        "checks": checks,
    }
