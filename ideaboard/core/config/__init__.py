from ideaboard.core.config.ideaboard_config import (
    CanvasConfig,
    IdeaBoardConfig,
    load_ideaboard_config,
)

__all__ = ['CanvasConfig', 'IdeaBoardConfig', 'load_ideaboard_config']
