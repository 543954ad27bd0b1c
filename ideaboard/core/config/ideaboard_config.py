"""Configuration models for the IdeaBoard server and canvas engine."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

from ideaboard.core.logger import ideaboard_logger as logger

DEFAULT_CONFIG_FILE = 'config.yaml'


class CanvasConfig(BaseModel):
    """Tunables of the canvas interaction engine.

    Distances are in screen pixels unless noted, card sizes and spacing are in
    canvas units.
    """

    min_zoom: float = Field(default=0.25, gt=0)
    max_zoom: float = Field(default=4.0, gt=0)
    wheel_zoom_in: float = 1.1
    wheel_zoom_out: float = 0.9
    button_zoom_in: float = 1.2
    button_zoom_out: float = 0.8
    drag_threshold: float = 5.0
    persist_debounce: float = Field(default=0.15, ge=0)  # seconds
    card_width: float = 250.0
    card_height: float = 200.0
    # Width of the floating sidebar covering the left edge of the viewport
    viewport_left_inset: float = 320.0
    spawn_jitter: float = 50.0
    nudge_step: float = 10.0
    organize_gap: float = 40.0
    grid_size: float = 20.0

    @model_validator(mode='after')
    def _check_zoom_range(self) -> CanvasConfig:
        if self.min_zoom > self.max_zoom:
            raise ValueError('min_zoom must not exceed max_zoom')
        return self


class IdeaBoardConfig(BaseModel):
    """Top level configuration.

    Attributes:
        file_store: Storage backend for board data, 'local' or 'memory'.
        file_store_path: Root directory of the local file store.
        session_api_keys: Maps accepted X-Session-API-Key values to user ids.
            When empty the server runs in single-user mode.
        api_base_url: Where the board HTTP client finds the server.
    """

    file_store: str = 'local'
    file_store_path: str = '~/.ideaboard'
    session_api_keys: dict[str, str] = Field(default_factory=dict)
    api_base_url: str = 'http://127.0.0.1:3000'
    host: str = '127.0.0.1'
    port: int = 3000
    canvas: CanvasConfig = Field(default_factory=CanvasConfig)


ENV_OVERRIDES = {
    'IDEABOARD_FILE_STORE': 'file_store',
    'IDEABOARD_FILE_STORE_PATH': 'file_store_path',
    'IDEABOARD_API_BASE_URL': 'api_base_url',
    'IDEABOARD_HOST': 'host',
    'IDEABOARD_PORT': 'port',
}


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open('r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        logger.warning(f'Failed to parse config file {path}: {e}')
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(f'Ignoring config file {path}: top level is not a mapping')
        return {}
    return data


def load_ideaboard_config(config_file: str | None = None) -> IdeaBoardConfig:
    """Load the config from YAML, then apply environment overrides.

    The file is taken from the argument, the IDEABOARD_CONFIG environment
    variable or ./config.yaml, in that order. A missing file is not an error.
    """
    path = Path(config_file or os.environ.get('IDEABOARD_CONFIG', DEFAULT_CONFIG_FILE))
    data = _load_yaml(path)

    for env_name, field_name in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            data[field_name] = value

    config = IdeaBoardConfig.model_validate(data)
    logger.debug(f'Loaded config (file_store={config.file_store}, path={config.file_store_path})')
    return config
