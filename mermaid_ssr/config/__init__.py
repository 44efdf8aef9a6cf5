from .init_script import build_init_script, init_options, kebab_to_camel
from .loader import ConfigError, config_from_mapping, load_config
from .models import Config, ErrorHandling, SecurityLevel

__all__ = [
    "Config",
    "ConfigError",
    "ErrorHandling",
    "SecurityLevel",
    "build_init_script",
    "config_from_mapping",
    "init_options",
    "kebab_to_camel",
    "load_config",
]
