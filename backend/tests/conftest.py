"""Shared fixtures: a scripted completion client and an API client with its dependencies swapped out."""
from __future__ import annotations

from collections import Counter
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

import httpx
import pytest
from fastapi.testclient import TestClient
from pydantic import BaseModel
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bhasha_guard import models  # noqa: F401  registers tables on Base.metadata
from bhasha_guard.db import Base, get_db
from bhasha_guard.dependencies import get_completion_client, get_extractor, get_news_search, get_source_fetcher
from bhasha_guard.exceptions import ModelError
from bhasha_guard.extraction import ContentExtractor
from bhasha_guard.news_search import NewsSearch
from bhasha_guard.prompts import CompletionRequest
from bhasha_guard.sources import PlatformSourceFetcher

Scripted = Union[BaseModel, Exception, Callable[[CompletionRequest], Any]]


class FakeCompletionClient:
	"""Answers each request from a response scripted per prompt name.

	A scripted value may be a model instance, an exception to raise, or a
	callable taking the request and returning either of those.
	"""

	def __init__(self, responses: Optional[Dict[str, Scripted]] = None) -> None:
		self.responses: Dict[str, Scripted] = dict(responses or {})
		self.calls: List[CompletionRequest] = []

	def script(self, name: str, response: Scripted) -> None:
		self.responses[name] = response

	def count(self, name: Optional[str] = None) -> int:
		if name is None:
			return len(self.calls)
		return Counter(call.name for call in self.calls)[name]

	async def complete(self, request: CompletionRequest) -> BaseModel:
		self.calls.append(request)
		if request.name not in self.responses:
			raise ModelError(f"no scripted response for {request.name}")
		response = self.responses[request.name]
		if not isinstance(response, (BaseModel, Exception)):
			response = response(request)
		if isinstance(response, Exception):
			raise response
		return response

	async def aclose(self) -> None:
		return None


def mock_http_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
	return httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)


@pytest.fixture
def fake_client() -> FakeCompletionClient:
	return FakeCompletionClient()


@pytest.fixture
def session_factory():
	engine = create_engine(
		"sqlite://",
		connect_args={"check_same_thread": False},
		poolclass=StaticPool,
		future=True,
	)
	Base.metadata.create_all(bind=engine)
	factory = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
	yield factory
	Base.metadata.drop_all(bind=engine)
	engine.dispose()


@pytest.fixture
def http_routes() -> Dict[str, Callable[[httpx.Request], httpx.Response]]:
	"""Per-host handlers used by the API client's outbound HTTP mocks."""
	return {}


@pytest.fixture
def api(fake_client: FakeCompletionClient, session_factory, http_routes) -> Iterator[TestClient]:
	from bhasha_guard.main import app

	def handler(request: httpx.Request) -> httpx.Response:
		route = http_routes.get(request.url.host)
		if route is None:
			return httpx.Response(404, text="not found")
		return route(request)

	def override_db():
		db = session_factory()
		try:
			yield db
		finally:
			db.close()

	app.dependency_overrides[get_completion_client] = lambda: fake_client
	app.dependency_overrides[get_extractor] = lambda: ContentExtractor(mock_http_client(handler))
	app.dependency_overrides[get_source_fetcher] = lambda: PlatformSourceFetcher(mock_http_client(handler))
	app.dependency_overrides[get_news_search] = lambda: NewsSearch(None, mock_http_client(handler))
	app.dependency_overrides[get_db] = override_db
	yield TestClient(app)
	app.dependency_overrides.clear()
