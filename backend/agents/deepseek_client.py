"""
Deepseek LLM client wrapper.

Provides interface to Deepseek API (OpenAI-compatible) for:
- Natural language response generation
- Tool selection (structured JSON decision)
- Health reporting that never exposes the API key

Every failure surfaces as a GatewayError so callers can fall back to the
deterministic path instead of mistaking an outage for "no tool needed".
"""

import json
import logging
import os
import time
from typing import Any, Dict, List, Literal, Optional

import requests
from pydantic import BaseModel, Field, ValidationError

from .errors import GatewayError, GatewayResponseError, GatewayUnavailableError
from .prompts import get_tool_selection_prompt

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.deepseek.com/v1"
DEFAULT_TIMEOUT = 30  # seconds per HTTP attempt

# Retry configuration
MAX_RETRIES = 3
INITIAL_BACKOFF = 1  # seconds
MAX_BACKOFF = 32  # seconds
BACKOFF_MULTIPLIER = 2


class ChatMessage(BaseModel):
    """Role-tagged message sent to the chat completions API."""
    role: Literal["system", "user", "assistant"]
    content: str


class ToolDecision(BaseModel):
    """Structured tool choice returned by the LLM. `tool=None` means no tool."""
    tool: Optional[str] = None
    parameters: Dict[str, Any] = Field(default_factory=dict)
    reasoning: str = ""


def extract_json(text: str) -> str:
    """Strip markdown code fences around a JSON payload, if any."""
    if "```json" in text:
        return text.split("```json")[1].split("```")[0].strip()
    if "```" in text:
        return text.split("```")[1].split("```")[0].strip()
    return text.strip()


class DeepseekClient:
    """Client for Deepseek LLM API (OpenAI-compatible)."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "deepseek-chat",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        initial_backoff: float = INITIAL_BACKOFF,
    ):
        """
        Initialize Deepseek client.

        Args:
            api_key: Deepseek API key (defaults to DEEPSEEK_API_KEY env var)
            model: Model to use (default: deepseek-chat)
            base_url: API base URL
            timeout: Timeout in seconds for each HTTP attempt
            max_retries: Attempts before giving up
            initial_backoff: First backoff delay in seconds
        """
        self.api_key = api_key or os.getenv("DEEPSEEK_API_KEY")
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.initial_backoff = initial_backoff

        if not self.api_key:
            logger.warning("No API key provided. LLM features disabled, using deterministic responses.")

        logger.info(f"DeepseekClient initialized with model: {model}")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _call_api_with_retry(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 1000
    ) -> Dict[str, Any]:
        """
        Call Deepseek API with exponential backoff retry.

        Args:
            messages: List of message dicts with 'role' and 'content'
            temperature: Temperature for sampling
            max_tokens: Max tokens in response

        Returns:
            API response data dict

        Raises:
            GatewayUnavailableError: If the request is rejected or all retries fail
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "stream": False
        }

        backoff = self.initial_backoff
        last_error = None

        for attempt in range(self.max_retries):
            retry = False
            try:
                response = requests.post(
                    f"{self.base_url}/chat/completions",
                    headers=headers,
                    json=payload,
                    timeout=self.timeout
                )

                if response.status_code == 429:
                    last_error = "Rate limited (429)"
                    retry = True
                elif response.status_code >= 500:
                    last_error = f"Server error ({response.status_code})"
                    retry = True
                elif response.status_code == 401:
                    logger.error("API authentication failed (401). Check your API key.")
                    raise GatewayUnavailableError("LLM authentication failed (401)")
                else:
                    response.raise_for_status()
                    return response.json()

            except requests.exceptions.Timeout:
                last_error = "Request timeout"
                retry = True
            except requests.exceptions.ConnectionError:
                last_error = "Connection error"
                retry = True
            except ValueError as e:
                # requests raises a JSONDecodeError that is also a RequestException
                raise GatewayResponseError(f"LLM returned invalid JSON: {e}") from e
            except requests.exceptions.RequestException as e:
                logger.error(f"Request failed: {e}")
                raise GatewayUnavailableError(f"LLM request failed: {e}") from e

            if retry and attempt < self.max_retries - 1:
                logger.warning(f"{last_error}. Attempt {attempt + 1}/{self.max_retries}. Backing off {backoff}s...")
                time.sleep(backoff)
                backoff = min(backoff * BACKOFF_MULTIPLIER, MAX_BACKOFF)

        raise GatewayUnavailableError(f"API call failed after {self.max_retries} attempts. Last error: {last_error}")

    def generate_response(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 1000,
        system_prompt: Optional[str] = None
    ) -> str:
        """
        Generate response from Deepseek.

        Args:
            messages: List of message dicts with 'role' and 'content'
            temperature: Temperature for sampling
            max_tokens: Max tokens in response
            system_prompt: Optional system prompt to prepend

        Returns:
            Generated response text

        Raises:
            GatewayUnavailableError: Client not configured or API unreachable
            GatewayResponseError: Malformed messages or reply
        """
        if not self.is_configured:
            raise GatewayUnavailableError("Deepseek client not configured (missing API key)")

        try:
            request_messages = [ChatMessage.model_validate(m).model_dump() for m in messages]
        except ValidationError as e:
            raise GatewayResponseError(f"Invalid chat messages: {e}") from e

        if system_prompt and (not request_messages or request_messages[0]["role"] != "system"):
            request_messages.insert(0, {"role": "system", "content": system_prompt})

        response_data = self._call_api_with_retry(request_messages, temperature, max_tokens)

        try:
            content = response_data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            logger.error(f"Unexpected API response format: {response_data}")
            raise GatewayResponseError("Unexpected API response format") from None

        if not isinstance(content, str) or not content.strip():
            raise GatewayResponseError("Empty response from LLM")
        return content

    def generate_tool_action(
        self,
        user_message: str,
        tool_catalog: List[Dict[str, Any]],
        conversation_history: Optional[List[Dict[str, str]]] = None
    ) -> Optional[ToolDecision]:
        """
        Ask the LLM which tool (if any) answers the user's message.

        Args:
            user_message: Current user message
            tool_catalog: Tool descriptions from the registry
            conversation_history: Recent role/content messages for context

        Returns:
            Validated ToolDecision, or None when the LLM says no tool is needed

        Raises:
            GatewayError: Unavailable gateway or an unparseable/invalid decision
        """
        messages = list(conversation_history or [])[-4:]
        messages.append({"role": "user", "content": user_message})

        response = self.generate_response(
            messages,
            temperature=0.0,
            max_tokens=400,
            system_prompt=get_tool_selection_prompt(tool_catalog)
        )

        try:
            decision = ToolDecision.model_validate(json.loads(extract_json(response)))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Invalid tool decision from LLM: {e}")
            raise GatewayResponseError(f"Invalid tool decision: {e}") from e

        if not decision.tool:
            return None
        return decision

    def status(self) -> Dict[str, Any]:
        """Configuration state for health endpoints. Never includes the key."""
        return {
            "provider": "deepseek",
            "configured": self.is_configured,
            "model": self.model,
            "base_url": self.base_url,
        }

    def check_api_health(self) -> bool:
        """Make a minimal live call; True if the API answered."""
        if not self.is_configured:
            return False
        try:
            self.generate_response([{"role": "user", "content": "ping"}], temperature=0.0, max_tokens=5)
            return True
        except GatewayError as e:
            logger.warning(f"Deepseek health check failed: {e}")
            return False
