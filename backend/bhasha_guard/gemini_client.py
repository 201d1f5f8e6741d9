from __future__ import annotations
import json
import logging
import re
import httpx
from typing import Any, Dict, Iterator, List, Optional, Protocol
from pydantic import BaseModel, ValidationError
from .exceptions import ConfigurationError, ModelError
from .prompts import CompletionRequest
from .settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

AI_STUDIO_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
VERTEX_URL = (
	"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}"
	"/publishers/google/models/{model}:generateContent"
)
FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")
MALFORMED_REPLY_ERRORS = (ValueError, KeyError, IndexError, TypeError)


class CompletionClient(Protocol):
	async def complete(self, request: CompletionRequest) -> BaseModel:
		...


def _json_candidates(text: str) -> Iterator[str]:
	yield text
	fenced = FENCED_JSON.search(text)
	if fenced:
		yield fenced.group(1)
	first, last = text.find("{"), text.rfind("}")
	if 0 <= first < last:
		yield text[first : last + 1]


def extract_json_object(text: str) -> Any:
	"""Pull the first JSON value out of a model reply (raw, fenced, or embedded in prose)."""
	for candidate in _json_candidates(text or ""):
		try:
			return json.loads(candidate)
		except json.JSONDecodeError:
			continue
	raise ModelError("Model did not return valid JSON.")


def parse_output(request: CompletionRequest, data: Any) -> BaseModel:
	if not isinstance(data, dict):
		raise ModelError(f"{request.name}: expected a JSON object, got {type(data).__name__}")
	try:
		return request.output_model.model_validate(data)
	except ValidationError as err:
		raise ModelError(f"{request.name}: output does not match schema ({err.error_count()} errors)") from err


def rejected_payload(err: ModelError) -> bool:
	"""True when Gemini refused the request body itself (4xx other than rate limiting)."""
	return err.status_code is not None and 400 <= err.status_code < 500 and err.status_code != 429


class OpenRouterFallback:
	"""Text-only second opinion through OpenRouter's chat completions API."""

	def __init__(self, config: Settings, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
		self.model = config.openrouter_model
		self.url = config.openrouter_base_url
		self.headers = {
			"Authorization": f"Bearer {config.openrouter_api_key}",
			"Content-Type": "application/json",
			"HTTP-Referer": config.openrouter_referer,
			"X-Title": config.openrouter_title,
		}
		self._client = httpx.AsyncClient(timeout=config.gemini_timeout_seconds, transport=transport)

	async def generate(self, prompt: str, *, primary_error: Optional[Exception] = None) -> str:
		body = {"model": self.model, "messages": [{"role": "user", "content": prompt}]}
		try:
			r = await self._client.post(self.url, headers=self.headers, json=body)
			r.raise_for_status()
			return r.json()["choices"][0]["message"]["content"]
		except (httpx.HTTPError, *MALFORMED_REPLY_ERRORS) as err:
			raise ModelError(f"Gemini call failed ({primary_error}); OpenRouter fallback also failed: {err}") from err

	async def aclose(self) -> None:
		await self._client.aclose()


class GeminiClient:
	def __init__(self, config: Optional[Settings] = None, *, api_key: Optional[str] = None, base_url: Optional[str] = None, model: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
		config = config or default_settings
		self.api_key = api_key or config.gemini_api_key
		if not self.api_key:
			raise ConfigurationError("GOOGLE_API_KEY is not configured")
		self.model = model or config.gemini_model
		self.provider = config.gemini_provider
		self.thinking_budget = config.gemini_thinking_budget
		if self.provider == "vertex":
			project = config.vertex_project or "placeholder-project"
			self.endpoint = base_url or VERTEX_URL.format(region=config.vertex_region, project=project, model=self.model)
			self._auth: Dict[str, Dict[str, str]] = {"headers": {"x-goog-api-key": self.api_key}}
		else:
			self.endpoint = base_url or AI_STUDIO_URL.format(model=self.model)
			self._auth = {"params": {"key": self.api_key}}
		self._client = httpx.AsyncClient(timeout=config.gemini_timeout_seconds, transport=transport)
		self.fallback = OpenRouterFallback(config, transport=transport) if config.openrouter_api_key else None

	@classmethod
	def configure(cls, config: Optional[Settings] = None, **kwargs: Any) -> "GeminiClient":
		client = cls(config, **kwargs)
		logger.info("Gemini client ready (provider=%s, model=%s, fallback=%s)", client.provider, client.model, client.fallback is not None)
		return client

	async def complete(self, request: CompletionRequest) -> BaseModel:
		prompt = request.render()
		parts: List[Dict[str, Any]] = [{"text": prompt}]
		parts += [{"inlineData": {"mimeType": media.mime_type, "data": media.data}} for media in request.media]
		generation_config = {"temperature": request.temperature, "responseMimeType": "application/json"}
		try:
			raw = await self._generate(parts, generation_config)
		except ModelError as err:
			# Multimodal requests cannot be replayed through the text-only fallback
			if self.fallback is None or request.media:
				raise
			logger.warning("Gemini call failed for %s, trying OpenRouter: %s", request.name, err)
			raw = await self.fallback.generate(prompt, primary_error=err)
		return parse_output(request, extract_json_object(raw))

	async def _generate(self, parts: List[Dict[str, Any]], generation_config: Dict[str, Any]) -> str:
		contents = [{"role": "user", "parts": parts}]
		if self.thinking_budget is not None:
			thinking_config = {**generation_config, "thinkingConfig": {"thinkingBudget": int(self.thinking_budget)}}
			try:
				return await self._post({"contents": contents, "generationConfig": thinking_config})
			except ModelError as err:
				if not rejected_payload(err):
					raise
				logger.info("Retrying without thinkingConfig: %s", err)
		return await self._post({"contents": contents, "generationConfig": generation_config})

	async def _post(self, payload: Dict[str, Any]) -> str:
		try:
			r = await self._client.post(self.endpoint, json=payload, **self._auth)
			r.raise_for_status()
		except httpx.HTTPStatusError as err:
			# str(err) would include the request URL and with it the key
			raise ModelError(
				f"Gemini returned {err.response.status_code}: {err.response.text[:300]}",
				status_code=err.response.status_code,
			) from err
		except httpx.RequestError as err:
			raise ModelError(f"Gemini request failed: {type(err).__name__}") from err
		try:
			return r.json()["candidates"][0]["content"]["parts"][0]["text"]
		except MALFORMED_REPLY_ERRORS as err:
			raise ModelError(f"Unexpected Gemini response: {r.text[:500]}") from err

	async def aclose(self) -> None:
		await self._client.aclose()
		if self.fallback is not None:
			await self.fallback.aclose()
