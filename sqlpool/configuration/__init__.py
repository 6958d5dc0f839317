from .main import config, config_default, config_get, read_configuration  # noqa: F401
