from stool.config.loader import (
    get_config_search_paths,
    get_platform_config_path,
    load_config,
    resolve_config_path,
)
from stool.config.settings import ServerConfig, StoolConfig

__all__ = [
    "ServerConfig",
    "StoolConfig",
    "get_config_search_paths",
    "get_platform_config_path",
    "load_config",
    "resolve_config_path",
]
