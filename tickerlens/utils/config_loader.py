# tickerlens/utils/config_loader.py

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# -------------------
# Pydantic Configs
# -------------------
class MarketDataConfig(BaseModel):
    base_url_env: str = "ALPHA_VANTAGE_BASE_URL"
    default_base_url: str = "https://www.alphavantage.co/query"
    api_key_env: str = "ALPHA_VANTAGE_API_KEY"
    max_periods: int = Field(default=10, ge=1)

class SearchConfig(BaseModel):
    debounce_ms: int = Field(default=500, ge=0)
    settle_ms: int = Field(default=100, ge=0)
    min_query_length: int = Field(default=2, ge=1)
    min_typing_length: int = Field(default=3, ge=1)
    max_live_results: int = Field(default=8, ge=1)
    max_fallback_results: int = Field(default=5, ge=1)

class SentimentConfig(BaseModel):
    base_url_env: str = "SENTIMENT_API_URL"
    default_base_url: str = "http://localhost:5000"
    dashboard_timeout: float = Field(default=15.0, gt=0)
    analyzer_timeout: float = Field(default=30.0, gt=0)

class NewsConfig(BaseModel):
    api_key_env: str = "NEWS_API_KEY"
    base_url: str = "https://newsapi.org/v2/everything"
    proxy_url_env: str = "NEWS_PROXY_URL"
    default_proxy_url: str = "http://localhost:8000"
    domains: List[str] = Field(default_factory=lambda: [
        "reuters.com",
        "bloomberg.com",
        "cnbc.com",
        "marketwatch.com",
        "finance.yahoo.com",
    ])
    page_size: int = Field(default=5, ge=1)
    max_articles: int = Field(default=3, ge=1)
    max_text_length: int = Field(default=2000, ge=1)

class ChartConfig(BaseModel):
    mobile_breakpoint: int = Field(default=768, ge=1)
    viewport_width: int = Field(default=1280, ge=1)

class LoggingConfig(BaseModel):
    level: str = "INFO"
    file: Optional[str] = None
    error_log_dir: Optional[str] = None

class DashboardConfig(BaseModel):
    market_data: MarketDataConfig = Field(default_factory=MarketDataConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    sentiment: SentimentConfig = Field(default_factory=SentimentConfig)
    news: NewsConfig = Field(default_factory=NewsConfig)
    charts: ChartConfig = Field(default_factory=ChartConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# Values shipped in example env files; treated as "not configured".
PLACEHOLDER_VALUES = {"your_newsapi_key_here", "your_alpha_vantage_key_here", "changeme"}


# -------------------
# Functions
# -------------------
def load_config(config_path: str) -> Dict[str, Any]:
    """
    Read a YAML config file into a plain dict.

    Args:
        config_path (str): Path to the YAML config file.

    Returns:
        Dict[str, Any]: Top-level mapping; an empty file gives {}.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the YAML cannot be parsed.
        ValueError: If the top level is not a mapping.
    """
    path = Path(config_path)
    if not path.is_file():
        logger.error(f"Config file not found: {config_path}")
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with path.open("r") as file:
        try:
            raw = yaml.safe_load(file)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing YAML config file {config_path}: {e}")
            raise

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping, got {type(raw).__name__}")
    logger.info(f"Loaded config from {config_path}")
    return raw


def load_typed_config(config_path: Optional[str] = None) -> DashboardConfig:
    """
    Load and validate the dashboard config as a typed Pydantic model.

    Args:
        config_path (str, optional): Path to a YAML config file. When omitted,
            the built-in defaults are returned.

    Returns:
        DashboardConfig: Typed configuration object.
    """
    if config_path is None:
        return DashboardConfig()
    raw_config = load_config(config_path)
    return DashboardConfig(**raw_config)


@lru_cache(maxsize=1)
def load_env_files() -> None:
    """Load .env and .env.local (if present) into the process environment once."""
    load_dotenv(".env")
    load_dotenv(".env.local")


def get_secret(env_var: str) -> Optional[str]:
    """
    Read an API key or URL from the environment.

    Only presence is checked: empty strings and known placeholders count as missing.

    Args:
        env_var (str): Environment variable name.

    Returns:
        Optional[str]: The stripped value, or None if not configured.
    """
    load_env_files()
    value = os.environ.get(env_var, "").strip()
    if not value or value in PLACEHOLDER_VALUES:
        return None
    return value
