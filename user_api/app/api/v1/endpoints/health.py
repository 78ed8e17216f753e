"""Liveness endpoint for API v1."""

from typing import Dict

from fastapi import APIRouter

router = APIRouter()


@router.get("", response_model=Dict[str, str])
async def health() -> Dict[str, str]:
    """Report that the process is up.  Does not touch the database."""
    return {"status": "ok"}
