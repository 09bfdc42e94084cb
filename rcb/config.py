"""Configuration loaded from environment (.env) and defaults."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Locate the project root .env file regardless of CWD
_THIS_DIR = Path(__file__).resolve().parent          # rcb/
_PROJECT_ROOT = _THIS_DIR.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Data directory (static content files for manual import live under it)
    rcb_data_dir: str = "./data"

    # Postgres for jobs / content / product cache. Unset -> in-memory stores.
    rcb_database_url: str | None = None

    # BigCommerce. Without credentials the demo catalog is served.
    bigcommerce_store_hash: str | None = None
    bigcommerce_access_token: str | None = None
    bigcommerce_page_limit: int = 250
    bigcommerce_timeout: float = 30.0

    # Content generator: template | llm
    rcb_generator: str = "template"

    # LLM provider: openai | anthropic
    rcb_llm_provider: str = "openai"
    openai_api_key: str | None = None
    rcb_openai_model: str = "gpt-4o"
    anthropic_api_key: str | None = None
    rcb_anthropic_model: str = "claude-3-5-sonnet-20241022"

    # Catalyst storefront
    catalyst_url: str = "https://riverpark-catalyst-fresh.vercel.app"
    catalyst_api_key: str | None = None
    catalyst_deployment_method: str = "file-sync"
    catalyst_timeout: float = 30.0

    # Job engine timings (seconds)
    rcb_tick_interval: float = 3.0
    rcb_start_delay: float = 1.0
    rcb_source_timeout: float = 60.0
    rcb_generation_timeout: float = 120.0
    rcb_max_retries: int = 3
    rcb_stream_heartbeat: float = 15.0

    # CORS origins (comma-separated). Defaults to localhost dev.
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    cors_origin_regex: str | None = None

    port: int = 8000

    @property
    def data_dir(self) -> Path:
        """Data directory as an absolute Path.

        Relative paths are resolved against the project root (not CWD).
        """
        p = Path(self.rcb_data_dir)
        if not p.is_absolute():
            return (_PROJECT_ROOT / p).resolve()
        return p.resolve()

    @property
    def output_dir(self) -> Path:
        """Static content files written when the storefront sync endpoint is absent."""
        return self.data_dir / "json-files"

    @property
    def bigcommerce_configured(self) -> bool:
        return bool(self.bigcommerce_store_hash and self.bigcommerce_access_token)

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def ensure_dirs(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.output_dir.mkdir(parents=True, exist_ok=True)


def get_settings() -> Settings:
    settings = Settings()
    settings.ensure_dirs()
    return settings
