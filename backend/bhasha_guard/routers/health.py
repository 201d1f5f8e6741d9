from fastapi import APIRouter
from fastapi.responses import JSONResponse
from ..settings import settings

router = APIRouter(tags=["health"])


def key_preview(key: str) -> str:
	return f"{key[:6]}...{key[-4:]}"


@router.get("/health")
async def health():
	key = settings.gemini_api_key or ""
	if len(key) <= 10:
		return JSONResponse(
			status_code=500,
			content={"status": "error", "message": "GOOGLE_API_KEY is missing or too short to be valid."},
		)
	return {"status": "ok", "key_preview": key_preview(key), "model": settings.gemini_model}
