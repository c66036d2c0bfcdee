from typing import Dict

from fastapi import APIRouter

router = APIRouter()


@router.get("", summary="Service health check")
async def health() -> Dict[str, str]:
    return {"status": "ok"}
