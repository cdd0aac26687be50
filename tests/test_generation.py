import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.runnables import RunnableLambda

from brand_quiz import generation
from brand_quiz.errors import GenerationFailure
from brand_quiz.generation import GenerationClient, PhaseSettings
from brand_quiz.prompts import STEP1, STEP2, FINAL
import config


def make_client(**kwargs):
    kwargs.setdefault('api_key', 'sk-test')
    return GenerationClient(model_name='test/model', base_url='https://example.invalid/api/v1', **kwargs)


@pytest.fixture
def chat_models(monkeypatch):
    """Replaces the OpenRouter client factory; tests put the model to return in ``models['next']``."""
    models = {'calls': []}

    def fake_factory(model_name, temperature, max_tokens, api_key, base_url, max_retries, timeout=None):
        models['calls'].append({'model_name': model_name, 'temperature': temperature, 'max_tokens': max_tokens})
        return models['next']

    monkeypatch.setattr(generation, 'get_openrouter_client', fake_factory)
    return models


def test_generate_returns_model_text(chat_models):
    chat_models['next'] = FakeListChatModel(responses=['SUMMARY 1: [MARKET LEADER] text'])
    assert make_client().generate(STEP1, 'prompt') == 'SUMMARY 1: [MARKET LEADER] text'


def test_generate_uses_phase_settings(chat_models):
    chat_models['next'] = FakeListChatModel(responses=['final text'])
    make_client().generate(FINAL, 'prompt')
    assert chat_models['calls'] == [{'model_name': 'test/model', 'temperature': 0.6, 'max_tokens': 4000}]


def test_phase_settings_can_be_overridden(chat_models):
    chat_models['next'] = FakeListChatModel(responses=['text'])
    make_client(phase_settings={STEP2: PhaseSettings(0.1, 100)}).generate(STEP2, 'prompt')
    assert chat_models['calls'][0]['temperature'] == 0.1
    assert chat_models['calls'][0]['max_tokens'] == 100


def test_empty_output_is_a_failure(chat_models):
    chat_models['next'] = FakeListChatModel(responses=['   '])
    with pytest.raises(GenerationFailure):
        make_client().generate(STEP1, 'prompt')


def test_api_error_is_wrapped(chat_models):
    def explode(_):
        raise RuntimeError('upstream 502')

    chat_models['next'] = RunnableLambda(explode)
    with pytest.raises(GenerationFailure) as excinfo:
        make_client().generate(STEP2, 'prompt')
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_missing_api_key_fails_without_calling_out(chat_models):
    with pytest.raises(GenerationFailure):
        make_client(api_key=None).generate(STEP1, 'prompt')
    assert chat_models['calls'] == []


def test_ping_returns_reply(chat_models):
    chat_models['next'] = FakeListChatModel(responses=['AI service is working correctly.'])
    assert make_client().ping() == 'AI service is working correctly.'


def test_from_config_reads_phase_settings():
    testing = config.TestingConfig
    settings = {key: getattr(testing, key) for key in dir(testing) if key.isupper()}
    client = GenerationClient.from_config(settings)
    assert client.model_name == testing.GENERATION_MODEL
    assert client.phase_settings[STEP1] == PhaseSettings(testing.STEP1_TEMPERATURE, testing.STEP1_MAX_TOKENS)
    assert client.phase_settings[FINAL].max_tokens == testing.FINAL_MAX_TOKENS
