from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field

class Settings(BaseSettings):
	gemini_api_key: str | None = Field(default=None, validation_alias=AliasChoices("GOOGLE_API_KEY", "GEMINI_API_KEY"))
	# Provider can be "vertex" (Vertex AI Express) or "ai_studio" (Generative Language API)
	gemini_provider: str = Field(default="ai_studio", validation_alias="GEMINI_PROVIDER")
	gemini_model: str = Field(default="gemini-2.0-flash", validation_alias="GEMINI_MODEL")
	gemini_timeout_seconds: float = Field(default=30.0, validation_alias="GEMINI_TIMEOUT_SECONDS")
	gemini_thinking_budget: int | None = Field(default=None, validation_alias="GEMINI_THINKING_BUDGET")
	# Vertex configuration
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")

	# OpenRouter fallback configuration (optional, text-only requests)
	openrouter_api_key: str | None = Field(default=None, validation_alias="OPENROUTER_API_KEY")
	openrouter_model: str = Field(default="x-ai/grok-4-fast:free", validation_alias="OPENROUTER_MODEL")
	openrouter_base_url: str = Field(default="https://openrouter.ai/api/v1/chat/completions", validation_alias="OPENROUTER_BASE_URL")
	openrouter_referer: str = Field(default="https://localhost", validation_alias="OPENROUTER_HTTP_REFERER")
	openrouter_title: str = Field(default="Bhasha Guard", validation_alias="OPENROUTER_TITLE")

	# Web search used by the fact checker
	serpapi_api_key: str | None = Field(default=None, validation_alias="SERPAPI_API_KEY")

	# Pipeline tuning
	translation_chunk_max_chars: int = Field(default=2500, validation_alias="TRANSLATION_CHUNK_MAX_CHARS")
	extraction_min_chars: int = Field(default=100, validation_alias="EXTRACTION_MIN_CHARS")
	fetch_timeout_seconds: float = Field(default=20.0, validation_alias="FETCH_TIMEOUT_SECONDS")
	max_concurrent_requests: int = Field(default=8, validation_alias="MAX_CONCURRENT_REQUESTS")

	# Admin gate: bearer tokens are signed by the identity provider with this secret
	jwt_secret_key: str = Field(default="change-me", validation_alias="JWT_SECRET_KEY")
	jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
	admin_email: str | None = Field(default=None, validation_alias="ADMIN_EMAIL")

	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
