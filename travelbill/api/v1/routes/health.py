from fastapi import APIRouter

from travelbill.core.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health():
    return {"status": "ok", "message": f"{settings.APP_NAME} running"}
