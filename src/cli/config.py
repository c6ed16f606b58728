"""Configuration file loading and validation.

Configuration file structure (.microtext/config.yaml), every field optional:
    content_root: src/pages
    content_field: microtext
    extension: .mdx
    drafts_file: .microtext/drafts.yaml
    repo_root: .
    default_template:
      title: New Item
      desc: Description
    interpreter_model: claude-sonnet-4-20250514
    interpreter_timeout: 60

A missing file means all defaults. Environment variables (also read from a
.env file) override the file:
    MICROTEXT_CONTENT_ROOT  -> content_root
    MICROTEXT_MODEL         -> interpreter_model
"""

import logging
import os
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

from .errors import ConfigError
from .models import EditorConfig

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Handles configuration file loading and validation."""

    DEFAULT_CONFIG_DIR = '.microtext'
    DEFAULT_CONFIG_FILE = '.microtext/config.yaml'

    STRING_FIELDS = ('content_root', 'content_field', 'extension', 'drafts_file', 'repo_root')

    ENV_OVERRIDES = {
        'MICROTEXT_CONTENT_ROOT': 'content_root',
        'MICROTEXT_MODEL': 'interpreter_model',
    }

    @classmethod
    def load(cls, config_path: str = DEFAULT_CONFIG_FILE) -> EditorConfig:
        """Load configuration, applying environment overrides.

        Raises:
            ConfigError: If the file cannot be read or holds invalid values
        """
        load_dotenv()

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            logger.debug(f"No config file at {config_path}, using defaults")
            content = ""
        except OSError as e:
            raise ConfigError(f"Failed to read {config_path}: {e}")

        if content.strip():
            try:
                config_dict = yaml.safe_load(content)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML syntax: {str(e)}")
        else:
            config_dict = {}

        if config_dict is None:
            config_dict = {}
        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        for env_name, config_field in cls.ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                config_dict[config_field] = value

        return cls._parse_config(config_dict)

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> EditorConfig:
        config = EditorConfig()

        unknown = set(config_dict) - set(EditorConfig.__dataclass_fields__)
        if unknown:
            raise ConfigError(f"Unknown field(s): {', '.join(sorted(unknown))}")

        for config_field in cls.STRING_FIELDS:
            if config_field in config_dict:
                value = config_dict[config_field]
                if not isinstance(value, str) or not value.strip():
                    raise ConfigError("must be a non-empty string", config_field)
                setattr(config, config_field, value.strip())

        if not config.extension.startswith('.'):
            raise ConfigError("must start with '.'", 'extension')

        if 'default_template' in config_dict:
            template = config_dict['default_template']
            if not isinstance(template, (dict, list, str)):
                raise ConfigError(
                    f"must be a dictionary, list or string, got {type(template).__name__}",
                    'default_template'
                )
            config.default_template = template

        if config_dict.get('interpreter_model') is not None:
            model = config_dict['interpreter_model']
            if not isinstance(model, str) or not model.strip():
                raise ConfigError("must be a non-empty string", 'interpreter_model')
            config.interpreter_model = model.strip()

        if 'interpreter_timeout' in config_dict:
            timeout = config_dict['interpreter_timeout']
            if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0:
                raise ConfigError("must be a positive integer", 'interpreter_timeout')
            config.interpreter_timeout = timeout

        return config
