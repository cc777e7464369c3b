"""
Model Factory - Infrastructure AI Layer
Factory pattern for creating text models from configuration
"""
from typing import Dict, Any, Optional
from enum import Enum
import logging
import time

from .base_model import BaseAIModel, ModelRequest, ModelResponse, ModelType
from .openai_model import OpenAIModel


class ModelProvider(Enum):
    """Supported model providers"""
    OPENAI = "openai"
    NONE = "none"


class UnconfiguredModel(BaseAIModel):
    """
    Stand-in used when no API key is configured.

    Every call fails immediately, which routes roadmap creation onto the
    fallback curriculum and resource augmentation onto an empty list.
    """

    def __init__(self, model_name: str = "unconfigured", config: Optional[Dict[str, Any]] = None):
        super().__init__(model_name, ModelType.UNCONFIGURED, config or {})

    def generate(self, request: ModelRequest) -> ModelResponse:
        return self.create_response(
            content="",
            processing_time=0.0,
            metadata={'error': "No language model configured"}
        )


class ModelFactory:
    """
    Factory for creating text models.
    No module-level instance: the API wiring owns the one it builds.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._model_registry = {
            ModelProvider.OPENAI: OpenAIModel,
            ModelProvider.NONE: UnconfiguredModel,
        }

    def create_model(self, provider: ModelProvider, model_name: str,
                     config: Dict[str, Any]) -> BaseAIModel:
        """
        Create a model

        Args:
            provider: Model provider
            model_name: Name of the model
            config: Model configuration

        Returns:
            Model instance
        """
        if provider not in self._model_registry:
            raise ValueError(f"No model registered for {provider.value}")

        start = time.time()
        model = self._model_registry[provider](model_name, config)
        self.logger.info(
            f"Created model {provider.value}/{model_name} in {(time.time() - start) * 1000:.1f}ms"
        )
        return model

    def create_from_settings(self, api_key: Optional[str], model_name: str,
                             base_url: Optional[str] = None,
                             timeout: float = 30.0) -> BaseAIModel:
        """
        Convenience method: OpenAI-compatible model when an API key is present,
        UnconfiguredModel otherwise.
        """
        if not api_key:
            self.logger.warning("No LLM API key configured; roadmaps will use the fallback curriculum")
            return self.create_model(ModelProvider.NONE, "unconfigured", {})

        return self.create_model(
            ModelProvider.OPENAI,
            model_name,
            {'api_key': api_key, 'base_url': base_url, 'timeout': timeout},
        )
