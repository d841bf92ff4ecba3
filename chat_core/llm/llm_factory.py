import importlib
from typing import Dict

from omegaconf import OmegaConf, DictConfig
from langchain_core.language_models.chat_models import BaseChatModel


class LLMFactory:
    """
    A factory class for creating LangChain chat model clients using OmegaConf.
    """

    def __init__(self, llm_providers_config: DictConfig):
        """
        Initializes the factory with the LLM provider configuration.

        Args:
            llm_providers_config: The `llms` section of the app config. It must
                                  contain an `llm_providers` mapping.
        """
        if (
            not isinstance(llm_providers_config, DictConfig)
            or "llm_providers" not in llm_providers_config
            or not isinstance(llm_providers_config.llm_providers, DictConfig)
        ):
            raise ValueError("LLM providers config must be a dictionary and contain a 'llm_providers' dictionary.")
        self._config = llm_providers_config.llm_providers

    def get_available_providers(self) -> Dict[str, str]:
        """Returns the configured provider keys and their display names."""
        if not self._config:
            return {}
        return {
            key: provider.get("display_name", key)
            for key, provider in self._config.items()
            if provider
        }

    def get_model_name(self, provider_key: str) -> str:
        """Returns the model configured for a provider, for display purposes."""
        params = self._get_provider_config(provider_key).get("params", {})
        return params.get("model") or params.get("model_name") or "unknown"

    def create_llm_client(self, provider_key: str) -> BaseChatModel:
        """
        Creates an LLM client instance based on the provider key.

        Args:
            provider_key: The key from llms.yaml (e.g., 'openai-gpt-4o-mini').

        Returns:
            An instance of the specified LangChain chat model.
        """
        provider_config = self._get_provider_config(provider_key)

        if "class" not in provider_config or "params" not in provider_config:
            raise ValueError(f"Provider '{provider_key}' configuration is missing 'class' or 'params'.")

        resolved_params = OmegaConf.to_container(provider_config.params, resolve=True)

        module_path, class_name = provider_config["class"].rsplit(".", 1)
        try:
            module = importlib.import_module(module_path)
            llm_class = getattr(module, class_name)
        except ImportError as e:
            raise ImportError(f"Could not import module '{module_path}' for LLM provider '{provider_key}'.") from e
        except AttributeError as e:
            raise AttributeError(f"Could not find class '{class_name}' in module '{module_path}'.") from e

        try:
            return llm_class(**resolved_params)
        except TypeError as e:
            raise TypeError(
                f"Failed to instantiate LLM client for '{provider_key}'. "
                f"Check if the parameters in the config match the class constructor. Error: {e}"
            ) from e

    def _get_provider_config(self, provider_key: str) -> DictConfig:
        if not self._config or provider_key not in self._config:
            raise ValueError(
                f"Provider '{provider_key}' not found in the configuration. "
                f"Available providers: {list(self._config.keys() if self._config else [])}"
            )
        return self._config.get(provider_key)
