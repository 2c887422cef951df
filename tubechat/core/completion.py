"""
Module for generating chat completions using LLM models.
"""

import asyncio
import os
from typing import List, Optional

import groq
from langchain.chat_models import init_chat_model
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from tubechat.config import config, chat_config
from tubechat.models.schemas import CompletionResult, ContextMessage, Role, TokenUsage
from tubechat.utils.error_handling import CompletionError, CompletionErrorCode
from tubechat.utils.logger import logging

_MESSAGE_TYPES = {
    Role.SYSTEM: SystemMessage,
    Role.USER: HumanMessage,
    Role.ASSISTANT: AIMessage,
}


def to_langchain_messages(messages: List[ContextMessage]) -> List[BaseMessage]:
    return [_MESSAGE_TYPES[Role(message.role)](content=message.content) for message in messages]


def classify_completion_error(error: Exception) -> CompletionError:
    """
    Map a provider failure onto a CompletionError.

    Args:
        error: Exception raised by the model call

    Returns:
        Structured CompletionError
    """
    if isinstance(error, CompletionError):
        return error

    message = str(error).lower()

    if isinstance(error, groq.AuthenticationError):
        return CompletionError(
            "Invalid API key. Please check your GROQ_API_KEY environment variable.",
            CompletionErrorCode.API_KEY_INVALID,
        )

    if isinstance(error, groq.RateLimitError):
        # Groq reports exhausted quota and request throttling with the same status
        if "quota" in message or "billing" in message:
            return CompletionError(
                "API quota exceeded. Please check your billing settings.",
                CompletionErrorCode.QUOTA_EXCEEDED,
            )
        return CompletionError(
            "API rate limit exceeded. Please try again later.",
            CompletionErrorCode.RATE_LIMITED,
        )

    if isinstance(error, groq.NotFoundError):
        return CompletionError(
            "Model not found. Please check the model name.",
            CompletionErrorCode.MODEL_NOT_FOUND,
        )

    if isinstance(error, groq.APIStatusError) and error.status_code == 402:
        return CompletionError(
            "API quota exceeded. Please check your billing settings.",
            CompletionErrorCode.QUOTA_EXCEEDED,
        )

    if isinstance(error, groq.BadRequestError) and (("content" in message and "filter" in message) or "safety" in message):
        return CompletionError(
            "Content was filtered by the provider's safety systems.",
            CompletionErrorCode.CONTENT_FILTERED,
        )

    if isinstance(error, (groq.APIConnectionError, asyncio.TimeoutError)):
        return CompletionError(
            "Network error while communicating with the model API.",
            CompletionErrorCode.NETWORK_ERROR,
        )

    status_code = getattr(error, "status_code", None)
    return CompletionError(
        f"Model API error: {error}",
        CompletionErrorCode.UNKNOWN_ERROR,
        status_code=status_code if isinstance(status_code, int) else None,
    )


class CompletionService:
    """Class to handle chat completion calls."""

    def __init__(self, api_key: Optional[str] = None, model_provider: str = config.MODEL_PROVIDER):
        """
        Initialize the completion service with API key.

        Args:
            api_key: Groq API key (if None, will try to get from environment)
            model_provider: langchain model provider name
        """
        self.api_key = api_key or os.getenv("GROQ_API_KEY")
        self.model_provider = model_provider

        if self.api_key:
            os.environ["GROQ_API_KEY"] = self.api_key

    async def complete(
        self,
        messages: List[ContextMessage],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: float = chat_config.COMPLETION_TIMEOUT,
    ) -> CompletionResult:
        """
        Generate a reply for an ordered list of context messages.

        Args:
            messages: Context, system message first when present
            model: Model name (defaults to the configured chat model)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            timeout: Seconds before the call is abandoned

        Returns:
            CompletionResult with text and token usage

        Raises:
            CompletionError: classified failure
        """
        model = model or config.DEFAULT_CHAT_MODEL
        temperature = config.DEFAULT_TEMPERATURE if temperature is None else temperature
        max_tokens = max_tokens or config.DEFAULT_MAX_TOKENS

        if not self.api_key:
            raise CompletionError(
                "Invalid API key. Please check your GROQ_API_KEY environment variable.",
                CompletionErrorCode.API_KEY_INVALID,
            )

        try:
            llm = init_chat_model(
                model=model,
                model_provider=self.model_provider,
                temperature=temperature,
                max_tokens=max_tokens,
            )
            response = await asyncio.wait_for(llm.ainvoke(to_langchain_messages(messages)), timeout=timeout)
        except Exception as e:
            logging.error(f"Completion call failed: {e}")
            raise classify_completion_error(e) from e

        content = response.content if isinstance(response.content, str) else ""
        if not content:
            raise CompletionError("No response from the model", CompletionErrorCode.UNKNOWN_ERROR)

        usage_metadata = getattr(response, "usage_metadata", None) or {}
        usage = TokenUsage(
            prompt_tokens=usage_metadata.get("input_tokens", 0),
            completion_tokens=usage_metadata.get("output_tokens", 0),
            total_tokens=usage_metadata.get("total_tokens", 0),
        )
        model_used = (getattr(response, "response_metadata", None) or {}).get("model_name") or model

        logging.info(f"Completion from {model_used} used {usage.total_tokens} tokens")
        return CompletionResult(text=content, usage=usage, model_used=model_used)
