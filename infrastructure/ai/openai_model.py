"""
OpenAI Model - Infrastructure AI Layer
Chat-completions client for OpenAI and OpenAI-compatible endpoints
"""
from typing import Dict, List, Any, Optional
import time
import logging

from openai import OpenAI

from .base_model import BaseAIModel, ModelRequest, ModelResponse, ModelType


class OpenAIModel(BaseAIModel):
    """
    OpenAI GPT model implementation.

    Works with any OpenAI-compatible base_url (OpenAI, Groq, Ollama, ...).
    The SDK's own retry loop is disabled: each call is a single attempt
    bounded by the request timeout.
    """

    def __init__(self, model_name: str, config: Dict[str, Any], client: Optional[OpenAI] = None):
        """
        Initialize OpenAI model

        Args:
            model_name: Model name (gpt-4o-mini, llama-3.1-8b-instant, ...)
            config: api_key, optional base_url and default timeout
            client: Pre-built SDK client (tests inject a stub here)
        """
        super().__init__(model_name, ModelType.OPENAI_GPT, config)

        self.client = client or OpenAI(
            api_key=config.get('api_key'),
            base_url=config.get('base_url') or None,
            timeout=config.get('timeout', 30.0),
            max_retries=0,
        )
        self.logger = logging.getLogger(__name__)

    def generate(self, request: ModelRequest) -> ModelResponse:
        """
        Generate response using OpenAI model

        Args:
            request: Standardized model request

        Returns:
            Standardized model response (error details in metadata on failure)
        """
        start_time = time.time()

        try:
            response = self.client.chat.completions.create(
                model=self.model_name,
                messages=self._prepare_messages(request),
                temperature=request.temperature,
                max_tokens=request.max_tokens,
                timeout=request.timeout,
            )

            content = (response.choices[0].message.content or "").strip()
            tokens_used = response.usage.total_tokens if response.usage else 0
            processing_time = time.time() - start_time

            self.logger.debug(
                f"OpenAI completion: {tokens_used} tokens in {processing_time * 1000:.0f}ms"
            )

            return self.create_response(
                content=content,
                processing_time=processing_time,
                tokens_used=tokens_used,
                metadata={
                    'model': response.model,
                    'finish_reason': response.choices[0].finish_reason,
                }
            )

        except Exception as e:
            processing_time = time.time() - start_time
            self.logger.error(f"OpenAI generation failed: {e}")

            return self.create_response(
                content="",
                processing_time=processing_time,
                metadata={'error': f"{type(e).__name__}: {e}"}
            )

    def _prepare_messages(self, request: ModelRequest) -> List[Dict[str, str]]:
        """
        Prepare messages for the chat completions API

        Args:
            request: Model request

        Returns:
            List of message dictionaries
        """
        messages = []

        if request.system_prompt:
            messages.append({
                "role": "system",
                "content": request.system_prompt
            })

        messages.append({
            "role": "user",
            "content": request.prompt
        })

        return messages
