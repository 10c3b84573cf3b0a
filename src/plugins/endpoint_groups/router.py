"""Endpoint group routes (read-only)."""

from fastapi import APIRouter

from core.storage import load_groups

router = APIRouter()


@router.get("/endpoint_groups")
def list_endpoint_groups():
    return [g.to_api() for g in load_groups()]
