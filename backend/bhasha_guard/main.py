import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .db import Base, engine
from .exceptions import (
	BhashaGuardError,
	ConfigurationError,
	ExtractionError,
	FetchError,
	InputValidationError,
	LanguageMismatchError,
	ModelError,
)
from .extraction import ContentExtractor
from .gemini_client import GeminiClient
from .news_search import NewsSearch
from .settings import settings
from .sources import PlatformSourceFetcher
from . import models  # noqa: F401  registers tables on Base.metadata
from .routers import articles, content, feedback, health, policy, text

logging.basicConfig(
	level=getattr(logging, settings.log_level.upper(), logging.INFO),
	format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
# httpx logs full request URLs, which carry API keys in the query string
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

ERROR_STATUS = (
	(InputValidationError, 400),
	(FetchError, 422),
	(ExtractionError, 422),
	(ModelError, 502),
	(ConfigurationError, 503),
)

app = FastAPI(title="Bhasha Guard API")
app.include_router(health.router)
app.include_router(text.router)
app.include_router(articles.router)
app.include_router(policy.router)
app.include_router(content.router)
app.include_router(feedback.router)


def status_for(exc: BhashaGuardError) -> int:
	for error_type, status_code in ERROR_STATUS:
		if isinstance(exc, error_type):
			return status_code
	return 500


@app.exception_handler(BhashaGuardError)
async def handle_bhasha_guard_error(request: Request, exc: BhashaGuardError):
	status_code = status_for(exc)
	if status_code >= 500:
		logger.error("%s %s failed: %s", request.method, request.url.path, exc)
	body = {"detail": str(exc)}
	if isinstance(exc, LanguageMismatchError):
		body["detected_language"] = exc.detected_language
		body["extracted_text"] = exc.extracted_text
	return JSONResponse(status_code=status_code, content=body)


@app.on_event("startup")
async def startup_event():
	# Initialize DB schema
	Base.metadata.create_all(bind=engine)
	try:
		app.state.completion_client = GeminiClient.configure(settings)
	except ConfigurationError as err:
		logger.warning("AI features disabled: %s", err)
		app.state.completion_client = None
	app.state.extractor = ContentExtractor(min_chars=settings.extraction_min_chars, timeout=settings.fetch_timeout_seconds)
	app.state.source_fetcher = PlatformSourceFetcher(timeout=settings.fetch_timeout_seconds)
	app.state.news_search = NewsSearch(settings.serpapi_api_key, timeout=settings.fetch_timeout_seconds)


@app.on_event("shutdown")
async def shutdown_event():
	for name in ("completion_client", "extractor", "source_fetcher", "news_search"):
		resource = getattr(app.state, name, None)
		if resource is not None:
			await resource.aclose()
