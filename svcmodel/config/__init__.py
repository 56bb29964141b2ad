"""
Configuration package.

Usage:
    from svcmodel.config import DbConfig, get_settings

    config = DbConfig.model_validate(get_settings().to_db_config())
"""

from svcmodel.config.settings import DbConfig, Settings, get_settings

__all__ = [
    "DbConfig",
    "Settings",
    "get_settings",
]
