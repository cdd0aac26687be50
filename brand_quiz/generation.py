import logging
from dataclasses import dataclass

from langchain_core.globals import set_verbose
from langchain_openai import ChatOpenAI
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.output_parsers import StrOutputParser

from .errors import GenerationFailure
from .prompts import STEP1, STEP2, FINAL, system_instruction

# Suppress the verbose warning by setting the global verbosity flag
set_verbose(False)

logger = logging.getLogger(__name__)

CHAT_PROMPT = ChatPromptTemplate.from_messages([
    ("system", "{system}"),
    ("human", "{prompt}"),
])


@dataclass(frozen=True)
class PhaseSettings:
    """Sampling parameters for one generation phase."""
    temperature: float
    max_tokens: int


DEFAULT_PHASE_SETTINGS = {
    STEP1: PhaseSettings(temperature=0.7, max_tokens=3000),
    STEP2: PhaseSettings(temperature=0.7, max_tokens=3500),
    FINAL: PhaseSettings(temperature=0.6, max_tokens=4000),
}


def get_openrouter_client(model_name, temperature, max_tokens, api_key, base_url, max_retries, timeout=None):
    """Helper function to create a ChatOpenAI client for OpenRouter."""
    return ChatOpenAI(
        model=model_name,
        temperature=temperature,
        max_tokens=max_tokens,
        openai_api_key=api_key,
        openai_api_base=base_url,
        default_headers={
            "HTTP-Referer": "http://localhost",
            "X-Title": "Brand Positioning Quiz"
        },
        max_retries=max_retries,
        timeout=timeout,
    )


class GenerationClient:
    """
    Calls the text-generation API with a fixed system instruction and
    sampling parameters per phase.

    One instance is built per application (see ``create_app``) and handed to
    the quiz logic, so tests can substitute any object with the same
    ``model_name`` attribute and ``generate(phase, prompt)`` method.
    """

    def __init__(self, api_key, model_name, base_url, max_retries=2, timeout=None, phase_settings=None):
        self.api_key = api_key
        self.model_name = model_name
        self.base_url = base_url
        self.max_retries = max_retries
        self.timeout = timeout
        self.phase_settings = dict(DEFAULT_PHASE_SETTINGS)
        if phase_settings:
            self.phase_settings.update(phase_settings)

    @classmethod
    def from_config(cls, config):
        phase_settings = {
            STEP1: PhaseSettings(config['STEP1_TEMPERATURE'], config['STEP1_MAX_TOKENS']),
            STEP2: PhaseSettings(config['STEP2_TEMPERATURE'], config['STEP2_MAX_TOKENS']),
            FINAL: PhaseSettings(config['FINAL_TEMPERATURE'], config['FINAL_MAX_TOKENS']),
        }
        return cls(
            api_key=config.get('OPENROUTER_API_KEY'),
            model_name=config['GENERATION_MODEL'],
            base_url=config['OPENROUTER_BASE_URL'],
            max_retries=config.get('OPENROUTER_MAX_RETRIES', 2),
            timeout=config.get('GENERATION_TIMEOUT'),
            phase_settings=phase_settings,
        )

    def _chat_model(self, settings):
        if not self.api_key:
            raise GenerationFailure("OPENROUTER_API_KEY not configured.")
        return get_openrouter_client(
            self.model_name,
            settings.temperature,
            settings.max_tokens,
            self.api_key,
            self.base_url,
            self.max_retries,
            self.timeout,
        )

    def generate(self, phase, prompt):
        """Returns the raw generated text for ``phase``. Raises GenerationFailure on API errors or empty output."""
        settings = self.phase_settings[phase]
        chain = CHAT_PROMPT | self._chat_model(settings) | StrOutputParser()
        try:
            content = chain.invoke({"system": system_instruction(phase), "prompt": prompt})
        except Exception as e:
            logger.error("Generation call for phase %s failed: %s", phase, e)
            raise GenerationFailure(f"Text generation failed for {phase}") from e

        if not content or not content.strip():
            logger.error("Generation call for phase %s returned no content", phase)
            raise GenerationFailure(f"No content generated for {phase}")

        logger.info("Generated %d characters for phase %s with %s", len(content), phase, self.model_name)
        return content

    def ping(self):
        """Sends a tiny request to check the API is reachable; returns the reply text."""
        chat_model = self._chat_model(PhaseSettings(temperature=0, max_tokens=50))
        chain = CHAT_PROMPT | chat_model | StrOutputParser()
        try:
            return chain.invoke({
                "system": "You are a health check endpoint.",
                "prompt": "Respond with 'AI service is working correctly.'",
            })
        except Exception as e:
            raise GenerationFailure(f"AI service is unavailable: {e}") from e
