"""
Configuration Settings
======================

Database configuration record and environment-backed settings,
both built on Pydantic V2.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import AnyUrl, BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from svcmodel.core.constants import DEFAULT_AUDIT_INDEX, DEFAULT_DIALECT


class DbConfig(BaseModel):
    """
    Validated database configuration.

    Accepts the camelCase keys used by callers (``dbName``, ``dbUser``...)
    as well as the snake_case field names. Unknown keys are rejected.

    Example:
        config = DbConfig.model_validate({
            "dbName": "offers",
            "dbUser": "svc",
            "dbPass": "secret",
            "dbHost": "localhost",
        })
        config.db_dialect  # "postgresql"
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    db_name: str = Field(alias="dbName", min_length=1)
    db_user: str = Field(alias="dbUser", min_length=1)
    db_pass: str = Field(alias="dbPass", min_length=1)
    db_host: str = Field(alias="dbHost", min_length=1)
    db_port: Optional[int] = Field(default=None, alias="dbPort", gt=0, lt=65536)
    db_dialect: str = Field(default=DEFAULT_DIALECT, alias="dbDialect", min_length=1)
    db_region: Optional[str] = Field(default=None, alias="dbRegion")
    db_arn: Optional[str] = Field(default=None, alias="dbArn")
    debug: bool = Field(default=False)
    audit_es: Optional[AnyUrl] = Field(default=None, alias="auditEs")
    audit_index: str = Field(default=DEFAULT_AUDIT_INDEX, alias="auditIndex", min_length=1)
    user_id: Optional[UUID] = Field(default=None, alias="userId")


class Settings(BaseSettings):
    """Database settings loaded from environment variables."""

    db_name: Optional[str] = Field(default=None)
    db_user: Optional[str] = Field(default=None)
    db_pass: Optional[str] = Field(default=None)
    db_host: Optional[str] = Field(default=None)
    db_port: Optional[int] = Field(default=None)
    db_dialect: str = Field(default=DEFAULT_DIALECT)
    db_region: Optional[str] = Field(default=None)
    db_arn: Optional[str] = Field(default=None)
    debug: bool = Field(default=False)
    audit_es: Optional[str] = Field(default=None)
    audit_index: str = Field(default=DEFAULT_AUDIT_INDEX)
    user_id: Optional[str] = Field(default=None)
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def to_db_config(self) -> Dict[str, Any]:
        """
        Build the raw configuration record for ``ServiceModel``.

        Unset optional values are left out so that validation reports
        missing required fields instead of null ones.
        """
        raw = self.model_dump(exclude={"log_level"}, exclude_none=True)
        return {DbConfig.model_fields[key].alias or key: value for key, value in raw.items()}


def get_settings() -> Settings:
    """Load settings from the current environment."""
    return Settings()
