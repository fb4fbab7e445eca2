import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests

from app.config import Settings
from app.core.errors import GenerationError
from app.core.logging import get_logger

logger = get_logger(__name__)

PROMPT_TEMPLATE = """
Please create an attractive and persuasive product description for an e-commerce website.
Use a professional and engaging tone.
The description should be in English.
Keep it to 2-3 short paragraphs.

Product Information:
- Product Name: {name}
- Characteristics/Attributes: {attributes}
"""

EMPTY_OUTPUT_MESSAGE = "Replicate API did not return any text."

TERMINAL_STATUSES = {"succeeded", "failed", "canceled"}

# Floor for per-request timeouts once the overall deadline is nearly spent
MIN_REQUEST_TIMEOUT = 0.1


def build_prompt(name: str, attributes: str) -> str:
    """Embed product name and attributes verbatim into the copywriting prompt."""
    return PROMPT_TEMPLATE.format(name=name, attributes=attributes)


def join_output(output: Any) -> str:
    """Concatenate streamed text fragments in order and trim the result."""
    if output is None:
        return ""
    if isinstance(output, str):
        return output.strip()
    return "".join(str(fragment) for fragment in output if fragment is not None).strip()


class DescriptionGenerator(ABC):
    """Interface for product description providers"""

    @abstractmethod
    def generate(self, name: str, attributes: str) -> str:
        """Return marketing copy for a product or raise GenerationError."""


class ReplicateGenerator(DescriptionGenerator):
    """Generates descriptions through the Replicate predictions API.

    One prediction is created per call. If Replicate hands it back before it
    finishes, the same prediction is polled until it reaches a terminal status
    or ``timeout`` seconds pass. Nothing is retried.
    """

    def __init__(
        self,
        api_token: str,
        model: str,
        base_url: str = "https://api.replicate.com",
        max_new_tokens: int = 300,
        min_new_tokens: int = 50,
        temperature: float = 0.8,
        timeout: float = 60.0,
        poll_interval: float = 1.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_token = api_token
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.max_new_tokens = max_new_tokens
        self.min_new_tokens = min_new_tokens
        self.temperature = temperature
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.session = session or requests.Session()

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
            "Prefer": "wait",
        }

    def build_input(self, prompt: str) -> Dict[str, Any]:
        return {
            "prompt": prompt,
            "max_new_tokens": self.max_new_tokens,
            "min_new_tokens": self.min_new_tokens,
            "temperature": self.temperature,
        }

    def prediction_request(self, prompt: str):
        """Return (url, payload) for the configured model identifier.

        ``owner/name:version`` targets a pinned version, ``owner/name`` the
        model's latest deployment.
        """
        model_input = self.build_input(prompt)
        if ":" in self.model:
            _, version = self.model.split(":", 1)
            return f"{self.base_url}/v1/predictions", {"version": version, "input": model_input}
        return f"{self.base_url}/v1/models/{self.model}/predictions", {"input": model_input}

    def generate(self, name: str, attributes: str) -> str:
        prompt = build_prompt(name, attributes)
        logger.info("Sending prompt to Replicate", model=self.model, product=name)

        deadline = time.monotonic() + self.timeout
        try:
            prediction = self._create_prediction(prompt, deadline)
            prediction = self._wait_for_prediction(prediction, deadline)
        except requests.RequestException as e:
            logger.error("Error calling Replicate", error=str(e))
            raise GenerationError(str(e) or None) from e
        except GenerationError as e:
            logger.error("Error calling Replicate", error=e.message)
            raise

        description = join_output(prediction.get("output"))
        if not description:
            logger.error("Error calling Replicate", error=EMPTY_OUTPUT_MESSAGE)
            raise GenerationError(EMPTY_OUTPUT_MESSAGE)

        logger.info("Received description from Replicate", prediction_id=prediction.get("id"), length=len(description))
        return description

    def _remaining(self, deadline: float) -> float:
        """Seconds left before ``deadline``, never below the request floor."""
        return max(deadline - time.monotonic(), MIN_REQUEST_TIMEOUT)

    def _create_prediction(self, prompt: str, deadline: float) -> Dict[str, Any]:
        url, payload = self.prediction_request(prompt)
        response = self.session.post(url, json=payload, headers=self.headers, timeout=self._remaining(deadline))
        return self._parse_response(response)

    def _wait_for_prediction(self, prediction: Dict[str, Any], deadline: float) -> Dict[str, Any]:
        while prediction.get("status") not in TERMINAL_STATUSES:
            poll_url = (prediction.get("urls") or {}).get("get")
            if not poll_url:
                raise GenerationError("Replicate prediction has no status URL")
            if time.monotonic() >= deadline:
                raise GenerationError(
                    f"Timed out after {self.timeout:g}s waiting for Replicate prediction {prediction.get('id')}"
                )
            time.sleep(min(self.poll_interval, max(deadline - time.monotonic(), 0)))
            response = self.session.get(poll_url, headers=self.headers, timeout=self._remaining(deadline))
            prediction = self._parse_response(response)

        if prediction["status"] != "succeeded":
            error = prediction.get("error")
            raise GenerationError(str(error) if error else f"Replicate prediction {prediction['status']}")

        return prediction

    @staticmethod
    def _parse_response(response: requests.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.ok:
            message = None
            if isinstance(body, dict):
                message = body.get("detail") or body.get("error") or body.get("title")
            raise GenerationError(str(message) if message else (response.text or None))

        if not isinstance(body, dict):
            raise GenerationError("Replicate returned an unexpected response")
        return body


class MockGenerator(DescriptionGenerator):
    """Offline generator for local development and tests"""

    def generate(self, name: str, attributes: str) -> str:
        keywords = ", ".join(part.strip() for part in attributes.split(",") if part.strip())
        return (
            f"Meet the {name}. "
            f"Crafted with attention to detail, it brings together {keywords or 'quality and style'}.\n\n"
            "This is a mock description. Configure REPLICATE_API_KEY to generate real copy."
        )


def get_generator(settings: Settings, session: Optional[requests.Session] = None) -> DescriptionGenerator:
    """Factory for the description provider"""
    if settings.mock_mode or not settings.replicate_api_key:
        logger.warning("Using mock description generator", mock_mode=settings.mock_mode)
        return MockGenerator()

    return ReplicateGenerator(
        api_token=settings.replicate_api_key,
        model=settings.replicate_model,
        base_url=settings.replicate_base_url,
        max_new_tokens=settings.generation_max_new_tokens,
        min_new_tokens=settings.generation_min_new_tokens,
        temperature=settings.generation_temperature,
        timeout=settings.generation_timeout,
        poll_interval=settings.generation_poll_interval,
        session=session,
    )
