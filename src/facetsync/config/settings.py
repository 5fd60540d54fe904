"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Environment variables (FACETSYNC_ prefix)
  2. YAML config file (if specified)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from facetsync.models.query import BaseFilters


class SolrSettings(BaseModel):
    """Search backend connection."""

    url: str = Field(default="http://localhost:8983/solr/select/", description="Absolute URL of the Solr select handler")
    passthru_url: str | None = Field(default=None, description="Proxy script URL; queries are POSTed here when set")
    timeout: float = Field(default=30.0, gt=0, description="HTTP request timeout in seconds")


class QuerySettings(BaseModel):
    """Query building configuration."""

    filters: BaseFilters = Field(default_factory=BaseFilters, description="Filters applied to all queries")
    hl_fl: str = Field(default="body", description="Field to highlight when rendering results")


class WatcherSettings(BaseModel):
    """Fragment polling configuration."""

    interval: float = Field(default=0.25, gt=0, description="Seconds between fragment checks")


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the FACETSYNC_ prefix.
    Nested settings use double underscores: FACETSYNC_SOLR__URL=http://...

    Example:
        FACETSYNC_SOLR__URL=http://solr:8983/solr/articles/select
        FACETSYNC_QUERY__HL_FL=content
        FACETSYNC_QUERY__FILTERS='{"fl": ["title"], "fq": ["lang:en"]}'
    """

    model_config = {
        "env_prefix": "FACETSYNC_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    debug: bool = Field(default=False, description="Debug mode")

    solr: SolrSettings = Field(default_factory=SolrSettings)
    query: QuerySettings = Field(default_factory=QuerySettings)
    watcher: WatcherSettings = Field(default_factory=WatcherSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
