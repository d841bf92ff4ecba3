import os
from pathlib import Path
from typing import Optional

from omegaconf import DictConfig, OmegaConf
from pydantic import ValidationError

from chat_core.models.chat_models import ChatSettings


def find_project_root(marker: str = "pyproject.toml") -> Path:
    """
    Finds the project root by walking up from this file until a directory
    containing `marker` is found.

    Raises:
        FileNotFoundError: If no parent directory contains the marker file.
    """
    current_path = Path(__file__).resolve()
    while current_path != current_path.parent:
        if (current_path / marker).exists():
            return current_path
        current_path = current_path.parent

    raise FileNotFoundError(
        f"Could not find the project root. "
        f"Searched for a '{marker}' file from '{Path(__file__).resolve()}' upwards."
    )


# --- Application-wide Constants ---
try:
    PROJECT_ROOT = find_project_root()
except FileNotFoundError:
    # Installed outside a source checkout; look for .env in the working directory.
    PROJECT_ROOT = Path.cwd()
PACKAGE_ROOT = Path(__file__).resolve().parent.parent
CONFIG_DIR = PACKAGE_ROOT / "config"
PROMPTS_DIR = PACKAGE_ROOT / "prompts"


def load_app_config(config_dir: Optional[Path] = None) -> DictConfig:
    """
    Loads every YAML file in the configuration directory into a single,
    namespaced OmegaConf DictConfig.

    Each file is stored under its filename stem, so `chat.yaml` is available
    as `config.chat`. Values may read environment variables with
    `${env:VAR_NAME}`.

    Args:
        config_dir: The configuration directory. Defaults to the package's
                    own `config` folder.

    Returns:
        The merged configuration.

    Raises:
        FileNotFoundError: If the configuration directory does not exist.
        RuntimeError: If a configuration file cannot be parsed.
    """
    # Registering twice raises, and this may be called more than once per process.
    if not OmegaConf.has_resolver("env"):
        OmegaConf.register_new_resolver("env", lambda name: os.environ.get(name))

    config_path = Path(config_dir) if config_dir is not None else CONFIG_DIR
    if not config_path.is_dir():
        raise FileNotFoundError(f"Configuration directory not found at '{config_path.resolve()}'")

    merged_config = OmegaConf.create()
    for p in sorted(config_path.glob("*.yaml")):
        try:
            merged_config[p.stem] = OmegaConf.load(p)
        except Exception as e:
            raise RuntimeError(f"Failed to load or parse configuration file '{p.name}': {e}") from e

    return merged_config


def load_chat_settings(app_config: DictConfig) -> ChatSettings:
    """Validates the `chat` section of the configuration."""
    chat_config = app_config.get("chat")
    if chat_config is None:
        raise ValueError("The configuration is missing the 'chat' section (chat.yaml).")

    try:
        return ChatSettings(**OmegaConf.to_container(chat_config, resolve=True))
    except ValidationError as e:
        raise ValueError(f"Invalid chat configuration: {e}") from e
