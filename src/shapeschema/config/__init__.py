from .load import ConfigError, load_config
from .model import Config, Output

__all__ = ["Config", "ConfigError", "Output", "load_config"]
