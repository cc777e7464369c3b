"""Infrastructure AI - text model clients"""
from .base_model import BaseAIModel, ModelRequest, ModelResponse, ModelType
from .model_factory import ModelFactory, ModelProvider, UnconfiguredModel
from .openai_model import OpenAIModel

__all__ = [
    "BaseAIModel",
    "ModelRequest",
    "ModelResponse",
    "ModelType",
    "ModelFactory",
    "ModelProvider",
    "UnconfiguredModel",
    "OpenAIModel",
]
