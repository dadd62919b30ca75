import pytest
from pydantic_ai.exceptions import UnexpectedModelBehavior
from pydantic_ai.messages import ModelResponse, TextPart, ToolCallPart
from reposhow.errors import ConfigurationError, GenerationError, UnexpectedResponseTypeError
from reposhow.refinery import engine
from reposhow.refinery.engine import GenerationClient, MAX_OUTPUT_TOKENS, TEMPERATURE


class RecordingRequest:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def __call__(self, model, messages, model_settings=None):
        self.calls.append((model, messages, model_settings))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_model():
    return object()


def test_unconfigured_client_raises_on_first_use():
    client = GenerationClient(api_key=None)
    assert not client.is_configured
    with pytest.raises(ConfigurationError):
        client.generate("prompt")


def test_returns_first_text_part(monkeypatch, fake_model):
    request = RecordingRequest(ModelResponse(parts=[TextPart(content='{"title": "T"}'), TextPart(content="extra")]))
    monkeypatch.setattr(engine, "model_request_sync", request)

    client = GenerationClient(model=fake_model)
    assert client.generate("Build me a talk") == '{"title": "T"}'

    model, messages, settings = request.calls[0]
    assert model is fake_model
    assert len(messages) == 1
    assert messages[0].parts[0].content == "Build me a talk"
    assert settings["max_tokens"] == MAX_OUTPUT_TOKENS == 4000
    assert settings["temperature"] == TEMPERATURE == 0.7


def test_non_text_first_part_is_rejected(monkeypatch, fake_model):
    response = ModelResponse(parts=[ToolCallPart(tool_name="lookup", args={"q": "x"}), TextPart(content="late text")])
    monkeypatch.setattr(engine, "model_request_sync", RecordingRequest(response))
    with pytest.raises(UnexpectedResponseTypeError):
        GenerationClient(model=fake_model).generate("prompt")


def test_empty_response_is_rejected(monkeypatch, fake_model):
    monkeypatch.setattr(engine, "model_request_sync", RecordingRequest(ModelResponse(parts=[])))
    with pytest.raises(UnexpectedResponseTypeError):
        GenerationClient(model=fake_model).generate("prompt")


def test_upstream_failure_becomes_generation_error(monkeypatch, fake_model):
    monkeypatch.setattr(engine, "model_request_sync", RecordingRequest(error=UnexpectedModelBehavior("overloaded")))
    with pytest.raises(GenerationError) as excinfo:
        GenerationClient(model=fake_model).generate("prompt")
    assert excinfo.value.status_code == 500
