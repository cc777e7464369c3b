"""
Base Model - Infrastructure AI Layer
Abstract base class for text-generation models so the roadmap generator
stays provider-agnostic
"""
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from enum import Enum

from domain.exceptions.domain_exceptions import UpstreamGenerationFailed


class ModelType(Enum):
    """Supported model types"""
    OPENAI_GPT = "openai_gpt"
    UNCONFIGURED = "unconfigured"


@dataclass
class ModelResponse:
    """Standardized model response"""
    content: str
    model_version: str
    processing_time: float
    tokens_used: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return "error" in self.metadata or not self.content.strip()


@dataclass
class ModelRequest:
    """Standardized model request"""
    prompt: str
    system_prompt: Optional[str] = None
    temperature: float = 0.2
    max_tokens: Optional[int] = None
    timeout: float = 30.0


class BaseAIModel(ABC):
    """
    Abstract base class for all text models.

    generate() never raises: provider errors come back as a ModelResponse
    whose metadata carries an ``error`` entry. generate_text() is the
    convenience used by application services and raises
    UpstreamGenerationFailed instead.
    """

    def __init__(self, model_name: str, model_type: ModelType, config: Dict[str, Any]):
        """
        Initialize base model

        Args:
            model_name: Name/identifier of the model
            model_type: Type of model (GPT, unconfigured, ...)
            config: Model-specific configuration
        """
        self.model_name = model_name
        self.model_type = model_type
        self.config = config
        self.version = config.get('version', '1.0.0')

    @abstractmethod
    def generate(self, request: ModelRequest) -> ModelResponse:
        """
        Generate response from model

        Args:
            request: Standardized model request

        Returns:
            Standardized model response
        """

    def generate_text(self, *, system: str, user: str, temperature: float = 0.2,
                      timeout: Optional[float] = None) -> str:
        """
        Single-shot text completion.

        Raises:
            UpstreamGenerationFailed: on invalid request, provider error or empty output
        """
        request = ModelRequest(
            prompt=user,
            system_prompt=system,
            temperature=temperature,
            timeout=timeout if timeout is not None else self.config.get('timeout', 30.0),
        )
        if not self.validate_request(request):
            raise UpstreamGenerationFailed("Invalid model request")

        response = self.generate(request)
        if response.failed:
            raise UpstreamGenerationFailed(
                response.metadata.get('error') or "Model returned empty content"
            )
        return response.content

    def validate_request(self, request: ModelRequest) -> bool:
        """
        Validate model request

        Args:
            request: Model request to validate

        Returns:
            True if request is valid
        """
        if not request.prompt or not request.prompt.strip():
            return False

        if request.temperature < 0 or request.temperature > 2:
            return False

        if request.max_tokens and request.max_tokens <= 0:
            return False

        if request.timeout <= 0:
            return False

        return True

    def create_response(self, content: str, processing_time: float,
                        tokens_used: Optional[int] = None,
                        metadata: Optional[Dict[str, Any]] = None) -> ModelResponse:
        """Create standardized model response"""
        return ModelResponse(
            content=content,
            model_version=self.version,
            processing_time=processing_time,
            tokens_used=tokens_used,
            metadata=metadata or {}
        )

