"""
Configuration management for SaveWatch
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import tomli


logger = logging.getLogger(__name__)

CONFIG_FILENAME = 'savewatch.config.toml'


@dataclass
class Config:
    """Configuration class for SaveWatch"""
    queue_size: int = 0
    max_restarts: int = 5
    restart_delay: float = 1.0
    health_interval: float = 0.5
    log_level: str = 'info'
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create Config instance from dictionary"""
        return cls(
            queue_size=int(data.get('queue_size', 0)),
            max_restarts=int(data.get('max_restarts', 5)),
            restart_delay=float(data.get('restart_delay', 1.0)),
            health_interval=float(data.get('health_interval', 0.5)),
            log_level=str(data.get('log_level', 'info'))
        )


def load_config(config_path: str) -> Optional[Config]:
    """Load configuration from TOML file"""
    try:
        config_file = Path(config_path)
        if not config_file.exists():
            return None
        
        with open(config_file, 'rb') as f:
            data = tomli.load(f)
        
        # Handle both flat and nested config formats
        if 'savewatch' in data:
            config_data = data['savewatch']
        else:
            config_data = data
            
        return Config.from_dict(config_data)
    
    except (OSError, tomli.TOMLDecodeError, TypeError, ValueError) as e:
        logger.error("Error loading config %s: %s", config_path, e)
        return None


def load_default_config() -> Config:
    """Load the default configuration from the package"""
    default_config_path = Path(__file__).parent.parent / 'default.config.toml'
    config = load_config(str(default_config_path))
    if config is None:
        # Sensible defaults if the packaged config can't be loaded
        return Config()
    return config
