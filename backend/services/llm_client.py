"""LLM Client for Groq API integration."""
import base64
import time
from dataclasses import dataclass
from typing import Optional, Dict, Any, List
from groq import Groq
from groq import RateLimitError, AuthenticationError, APIError, APITimeoutError
import logging

from config import GROQ_API_KEY, TEXT_MODEL, VISION_MODEL, MAX_TOKENS, TEMPERATURE, TRANSLATE_CHAR_LIMIT

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """Response from LLM generation."""
    text: str
    tokens_input: int
    tokens_output: int
    latency_ms: int
    model_used: str


@dataclass
class LLMError:
    """Structured error response from LLM operations."""
    code: str
    message: str
    details: Dict[str, Any]


class LLMClientError(Exception):
    """Custom exception for LLM client errors with structured error information."""

    def __init__(self, error: LLMError):
        self.error = error
        super().__init__(error.message)


@dataclass
class ImageInput:
    """Inline image attachment for a vision request."""
    data: bytes
    mime_type: str

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


class LLMClient:
    """Client for interfacing with Groq API for text generation."""

    def __init__(self, api_key: Optional[str] = None):
        """
        Initialize LLM client with Groq API key.

        Args:
            api_key: Groq API key (defaults to GROQ_API_KEY from environment)
        """
        self.api_key = api_key or GROQ_API_KEY
        if not self.api_key:
            raise ValueError("GROQ_API_KEY must be provided or set in environment")

        self.client = Groq(api_key=self.api_key)
        logger.info("LLMClient initialized successfully")

    def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        image: Optional[ImageInput] = None,
        model: Optional[str] = None,
        max_tokens: int = MAX_TOKENS
    ) -> LLMResponse:
        """
        Generate a response from a prompt, optionally with an inline image.

        Each call is a single attempt; failures are not retried.

        Args:
            prompt: Complete prompt text
            system_instruction: Optional system message
            image: Optional image attachment (switches to the vision model)
            model: Override for the model name
            max_tokens: Maximum tokens to generate

        Returns:
            LLMResponse with text (empty string if the model returned none)

        Raises:
            LLMClientError: Structured error with code, message, and details
        """
        model = model or (VISION_MODEL if image else TEXT_MODEL)
        messages = self._build_messages(prompt, system_instruction, image)
        start_time = time.time()

        try:
            logger.debug(f"Generating response with model: {model}, image={image is not None}")

            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=TEMPERATURE
            )

            latency_ms = int((time.time() - start_time) * 1000)
            text = response.choices[0].message.content or ""
            tokens_input = response.usage.prompt_tokens
            tokens_output = response.usage.completion_tokens

            logger.info(
                f"Generated response: model={model}, "
                f"input_tokens={tokens_input}, output_tokens={tokens_output}, "
                f"latency={latency_ms}ms"
            )

            return LLMResponse(
                text=text,
                tokens_input=tokens_input,
                tokens_output=tokens_output,
                latency_ms=latency_ms,
                model_used=model
            )

        except RateLimitError as e:
            raise self._error(
                "RATE_LIMIT_ERROR",
                "Rate limit exceeded. Please try again in a few moments.",
                model, start_time, e, retry_after=60
            )
        except AuthenticationError as e:
            raise self._error(
                "AUTHENTICATION_ERROR",
                "Authentication failed. Please check your API key.",
                model, start_time, e
            )
        except APITimeoutError as e:
            raise self._error(
                "TIMEOUT_ERROR", "Request timed out. Please try again.", model, start_time, e
            )
        except APIError as e:
            raise self._error(
                "API_ERROR", f"Groq API error: {str(e)}", model, start_time, e
            )
        except Exception as e:
            raise self._error(
                "UNKNOWN_ERROR",
                f"Unexpected error during generation: {str(e)}",
                model, start_time, e, error_type=type(e).__name__
            )

    @staticmethod
    def _build_messages(
        prompt: str,
        system_instruction: Optional[str],
        image: Optional[ImageInput]
    ) -> List[Dict[str, Any]]:
        messages: List[Dict[str, Any]] = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})

        if image is None:
            messages.append({"role": "user", "content": prompt})
        else:
            messages.append({
                "role": "user",
                "content": [
                    {"type": "image_url", "image_url": {"url": image.to_data_url()}},
                    {"type": "text", "text": prompt},
                ]
            })
        return messages

    @staticmethod
    def _error(
        code: str,
        message: str,
        model: str,
        start_time: float,
        original: Exception,
        **extra: Any
    ) -> LLMClientError:
        latency_ms = int((time.time() - start_time) * 1000)
        details = {
            "model": model,
            "latency_ms": latency_ms,
            "original_error": str(original),
            **extra
        }
        error = LLMError(code=code, message=message, details=details)
        logger.error(
            f"LLM request failed: code={code}, model={model}, latency={latency_ms}ms, error={original}",
            exc_info=True,
            extra={"error_code": code, "error_details": details}
        )
        return LLMClientError(error)

    @staticmethod
    def build_chat_prompt(document_text: str, question: str) -> str:
        """Prompt for answering a question about a document."""
        return f"Document Content:\n{document_text}\n\nUser Question: {question}"

    @staticmethod
    def build_translate_prompt(document_text: str) -> str:
        """Prompt for translating document text to Hindi; input is capped."""
        return f"Translate to Hindi:\n\n{document_text[:TRANSLATE_CHAR_LIMIT]}"

    @staticmethod
    def build_convert_prompt(document_text: str) -> str:
        """Prompt for reformatting document text as a professional document."""
        return f"Format this text as a professional document:\n\n{document_text}"
