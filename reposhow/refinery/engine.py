import logging
from typing import Optional
from pydantic_ai.direct import model_request_sync
from pydantic_ai.exceptions import AgentRunError, UserError
from pydantic_ai.messages import ModelRequest, TextPart
from pydantic_ai.models import Model
from pydantic_ai.settings import ModelSettings

from reposhow.config import DEFAULT_MODEL
from reposhow.errors import ConfigurationError, GenerationError, UnexpectedResponseTypeError

logger = logging.getLogger(__name__)

MAX_OUTPUT_TOKENS = 4000
# Structure is enforced by the normalizer, not the sampler.
TEMPERATURE = 0.7

MISSING_KEY_MESSAGE = "Server configuration error. Please check API key setup."


def build_anthropic_model(api_key: str, model_name: str = DEFAULT_MODEL) -> Model:
    from pydantic_ai.models.anthropic import AnthropicModel
    from pydantic_ai.providers.anthropic import AnthropicProvider

    return AnthropicModel(model_name, provider=AnthropicProvider(api_key=api_key))


class GenerationClient:
    """
    Long-lived wrapper around the text-generation model. Build it once at
    startup and share it; a missing key only surfaces when generate() runs.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: str = DEFAULT_MODEL,
        max_tokens: int = MAX_OUTPUT_TOKENS,
        temperature: float = TEMPERATURE,
        model: Optional[Model] = None,
    ):
        self.model_name = model_name
        self.max_tokens = max_tokens
        self.temperature = temperature
        if model is None and api_key:
            model = build_anthropic_model(api_key, model_name)
        self.model = model

    @property
    def is_configured(self) -> bool:
        return self.model is not None

    def generate(self, prompt: str) -> str:
        """
        Sends one user message and returns the text of the first response part.
        """
        if self.model is None:
            raise ConfigurationError(MISSING_KEY_MESSAGE)

        settings = ModelSettings(max_tokens=self.max_tokens, temperature=self.temperature)
        try:
            response = model_request_sync(
                self.model,
                [ModelRequest.user_text_prompt(prompt)],
                model_settings=settings,
            )
        except (AgentRunError, UserError) as e:
            raise GenerationError(f"Generation service request failed: {e}") from e

        if not response.parts:
            raise UnexpectedResponseTypeError("Unexpected response type from the generation service: empty response")

        first = response.parts[0]
        if not isinstance(first, TextPart):
            logger.warning("First response part was %s, expected text", getattr(first, "part_kind", type(first).__name__))
            raise UnexpectedResponseTypeError("Unexpected response type from the generation service")
        return first.content
