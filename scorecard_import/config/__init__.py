from .loader import ConfigError, ImportConfig, load_config

__all__ = [
    "ConfigError",
    "ImportConfig",
    "load_config",
]
