from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class JorudanConfig(BaseSettings):
    """Configuration for the J-Route Planner endpoints.

    Automatically loads from environment variables and .env file.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    suggest_url: str = Field(
        default="https://navi.jorudan.co.jp/api/compat/suggest/agg",
        alias="JORUDAN_SUGGEST_URL",
    )
    route_search_url: str = Field(
        default="https://www.jorudan.co.jp/norikae/cgi/nori.cgi",
        alias="JORUDAN_ROUTE_SEARCH_URL",
    )
    request_timeout_seconds: float = Field(default=30.0, alias="JORUDAN_TIMEOUT")
    user_agent: str = Field(default="japan-transfer-mcp/0.1", alias="JORUDAN_USER_AGENT")


class ServerConfig(BaseSettings):
    """Process-level settings: HTTP bind address and tokenizer encoding."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")
    token_encoding: str = Field(default="cl100k_base", alias="TOKEN_ENCODING")


@lru_cache
def get_jorudan_config() -> JorudanConfig:
    """Get J-Route Planner configuration (cached singleton).

    Returns:
        JorudanConfig with values from .env file or environment variables.
    """
    return JorudanConfig()


@lru_cache
def get_server_config() -> ServerConfig:
    """Get server configuration (cached singleton)."""
    return ServerConfig()
