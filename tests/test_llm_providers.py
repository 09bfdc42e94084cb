"""Tests for the LLM provider adapters with stubbed SDK clients."""

from types import SimpleNamespace

from rcb.generate import LLMContentGenerator, TemplateContentGenerator, build_generator
from rcb.llm import AnthropicProvider, OpenAIProvider, get_provider
from rcb.schemas.content import QAPair


class _Recorder:
    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        return self.reply


def test_openai_structured_call_requests_json_and_model():
    provider = OpenAIProvider(api_key="sk-test", model="gpt-4o")
    message = SimpleNamespace(content='{"question": "Q?", "answer": "A."}')
    completions = _Recorder(SimpleNamespace(choices=[SimpleNamespace(message=message)]))
    provider._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))

    result = provider.complete_structured("Write one FAQ", QAPair, model="gpt-4-turbo")

    assert result == QAPair(question="Q?", answer="A.")
    call = completions.calls[0]
    assert call["model"] == "gpt-4-turbo"
    assert call["response_format"] == {"type": "json_object"}
    assert call["messages"][0]["content"].startswith("Write one FAQ")


def test_openai_defaults_to_configured_model():
    provider = OpenAIProvider(api_key="sk-test", model="gpt-4o")
    message = SimpleNamespace(content=None)
    completions = _Recorder(SimpleNamespace(choices=[SimpleNamespace(message=message)]))
    provider._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    assert provider.complete("hi") == ""
    assert completions.calls[0]["model"] == "gpt-4o"


def test_anthropic_uses_configured_model():
    provider = AnthropicProvider(api_key="sk-ant-test", model="claude-test")
    messages = _Recorder(SimpleNamespace(content=[SimpleNamespace(text='```json\n{"question": "Q?", "answer": "A."}\n```')]))
    provider._client = SimpleNamespace(messages=messages)

    result = provider.complete_structured("Write one FAQ", QAPair)

    assert result.answer == "A."
    assert messages.calls[0]["model"] == "claude-test"
    assert messages.calls[0]["max_tokens"] == 4096


def test_get_provider_by_name():
    assert isinstance(get_provider("anthropic", api_key="k"), AnthropicProvider)
    assert isinstance(get_provider("openai", api_key="k"), OpenAIProvider)


def test_build_generator_selection(settings):
    assert isinstance(build_generator(settings), TemplateContentGenerator)
    settings.rcb_generator = "llm"
    settings.openai_api_key = "sk-test"
    assert isinstance(build_generator(settings), LLMContentGenerator)
