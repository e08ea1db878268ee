import copy
import os
import yaml
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

# Default configuration
DEFAULT_CONFIG = {
    "storage": {
        "data_dir": "data",
        "delimiter": ",",
        # relation name -> csv file, relative to data_dir
        "relations": {}
    },
    "evaluation": {
        "distinct": True,
        "show_progress": False
    },
    "output": {
        "path": "output.csv"
    }
}


def _merge(target: Dict, overrides: Dict) -> None:
    """Merge `overrides` into `target` in place; nested sections merge key by key."""
    for key, value in overrides.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _merge(current, value)
        else:
            target[key] = value


class Config:
    """
    Settings for relation storage, evaluation and batch output.

    One instance per process (see `config` below); values are addressed by
    dotted paths such as "storage.data_dir" or "evaluation.distinct".
    """

    _instance = None

    @classmethod
    def get_instance(cls) -> 'Config':
        if cls._instance is None:
            cls._instance = Config()
        return cls._instance

    def __init__(self):
        if Config._instance is not None:
            raise RuntimeError("Config is a singleton. Use Config.get_instance() instead.")
        self._values: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        self._source: Optional[str] = None

    def load_from_file(self, config_file: str) -> None:
        """Overlay a YAML file on the current settings. Missing or unreadable files keep them as they are."""
        if not os.path.isfile(config_file):
            logger.warning(f"Config file {config_file} not found. Using default configuration.")
            return
        try:
            with open(config_file, 'r') as f:
                loaded = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading config file {config_file}: {e}")
            return
        if not isinstance(loaded, dict):
            logger.warning(f"Config file {config_file} holds no settings. Using default configuration.")
            return
        _merge(self._values, loaded)
        self._source = config_file
        logger.info(f"Loaded configuration from {config_file}")

    def get(self, path: str, default: Any = None) -> Any:
        node: Any = self._values
        for part in path.split('.'):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, path: str, value: Any) -> None:
        *sections, leaf = path.split('.')
        node = self._values
        for part in sections:
            if not isinstance(node.get(part), dict):
                node[part] = {}
            node = node[part]
        node[leaf] = value

    def reset(self) -> None:
        """Back to DEFAULT_CONFIG, forgetting any loaded file."""
        self._values = copy.deepcopy(DEFAULT_CONFIG)
        self._source = None

    def get_relation_files(self) -> Dict[str, str]:
        """Relation name -> CSV path, with storage.data_dir prefixed."""
        data_dir = self.get('storage.data_dir', 'data')
        relations = self.get('storage.relations') or {}
        return {name: os.path.join(data_dir, filename) for name, filename in relations.items()}

    def save(self, config_file: Optional[str] = None) -> None:
        """Write the current settings as YAML, by default back to the loaded file."""
        target = config_file or self._source
        if not target:
            logger.warning("No config file specified for saving.")
            return
        with open(target, 'w') as f:
            yaml.safe_dump(self._values, f, default_flow_style=False)
        logger.info(f"Saved configuration to {target}")


# Singleton instance
config = Config.get_instance()
