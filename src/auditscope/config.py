"""
Runtime settings for AuditScope using Pydantic settings.

Values come from (in order of precedence) explicit keyword arguments,
``AUDITSCOPE_*`` environment variables and a ``.env`` file. The audit weight
table is configured separately, see :mod:`auditscope.core.weights`.
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SOLC_LIST_URL = "https://solc-bin.ethereum.org/bin/list.json"
DEFAULT_VENDOR_BASE_DIR = "./node_modules/@openzeppelin/"
DEFAULT_SOURCE_UNIT_NAME = "contract.sol"


def load_environment(env_path: Optional[Path] = None) -> None:
    """Load environment variables from a .env file if it exists."""
    env_path = env_path or Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)


class LogLevel(str, Enum):
    """Logging level options."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Main application settings.

    Environment Variables:
        AUDITSCOPE_SOLC_LIST_URL: str - Compiler release catalog URL
        AUDITSCOPE_REQUEST_TIMEOUT: float - Catalog fetch timeout in seconds (default: 10)
        AUDITSCOPE_VENDOR_BASE_DIR: str - Directory holding vendored @openzeppelin sources
        AUDITSCOPE_SOURCE_UNIT_NAME: str - Name given to the contract in the compiler job
        AUDITSCOPE_SCORING_MODE: str - ``per_unit`` or ``aggregate_once``
        AUDITSCOPE_LOG_LEVEL: str - Logging level (default: INFO)
        AUDITSCOPE_JSON_LOGS: bool - Use JSON formatted logs
    """

    model_config = SettingsConfigDict(
        env_prefix="AUDITSCOPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    SOLC_LIST_URL: str = Field(
        DEFAULT_SOLC_LIST_URL,
        description="URL of the solc release list (maps versions to build files)",
    )
    REQUEST_TIMEOUT: float = Field(
        10.0,
        description="Timeout for the catalog request in seconds",
        gt=0,
    )
    VENDOR_BASE_DIR: str = Field(
        DEFAULT_VENDOR_BASE_DIR,
        description="Base directory that @openzeppelin imports are rewritten to",
    )
    SOURCE_UNIT_NAME: str = Field(
        DEFAULT_SOURCE_UNIT_NAME,
        description="Source unit name of the analysed contract",
        min_length=1,
    )
    SCORING_MODE: str = Field(
        "per_unit",
        description="How document-level signals are counted per contract unit",
    )
    LOG_LEVEL: LogLevel = Field(
        LogLevel.INFO,
        description="Logging level",
    )
    LOG_FORMAT: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    JSON_LOGS: bool = Field(
        False,
        description="Use JSON format for logs",
    )

    @field_validator("SCORING_MODE")
    @classmethod
    def validate_scoring_mode(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("per_unit", "aggregate_once"):
            raise ValueError(
                f"Invalid scoring mode '{v}'. Must be one of: per_unit, aggregate_once"
            )
        return v

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings instance with environment variable overrides."""
        load_environment()
        return cls()
