# Configuration loader for Orderline
# config.json over defaults, API settings overridable from the environment

import os
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

CONFIG_FILE = 'config.json'

DEFAULTS: Dict[str, Any] = {
    'catalog_path': None,
    'api_url': None,
    'api_key': None,
    'http_port': 8080,
    'log_path': None,
    'log_level': 'INFO',
}

ENV_OVERRIDES = {
    'ORDERLINE_API_URL': 'api_url',
    'ORDERLINE_API_KEY': 'api_key',
}


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Read config.json (if present) merged over DEFAULTS."""
    config = dict(DEFAULTS)

    config_path = Path(path) if path else Path.cwd() / CONFIG_FILE
    if config_path.exists():
        with open(config_path, encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{config_path} must contain a JSON object")
        config.update(data)
    elif path:
        logger.warning(f"Config file {config_path} not found, using defaults")

    for env_name, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            config[key] = value

    return config
