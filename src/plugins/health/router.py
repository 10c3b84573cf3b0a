"""Liveness probe."""

from fastapi import APIRouter

from core.storage import load_endpoint_records

router = APIRouter()


@router.get("/health")
def health():
    return {"status": "ok", "endpoints": len(load_endpoint_records())}
