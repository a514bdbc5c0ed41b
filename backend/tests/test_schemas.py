import pydantic
import pytest

from raillovable.config import Settings, clean_api_key, settings
from raillovable.schemas.project import Attachment


def test_attachment_strips_data_url_prefix():
    attachment = Attachment(
        name="shot.png", mime_type="image/png", size_bytes=3, data="data:image/png;base64,AAAA"
    )
    assert attachment.data == "AAAA"
    assert attachment.is_image


def test_attachment_over_limit_is_rejected(monkeypatch):
    monkeypatch.setattr(settings, "max_attachment_bytes", 9)

    Attachment(name="ok.png", mime_type="image/png", size_bytes=9, data="A" * 12)
    with pytest.raises(pydantic.ValidationError):
        Attachment(name="big.png", mime_type="image/png", size_bytes=12, data="A" * 16)


def test_attachment_payload_larger_than_declared_is_rejected(monkeypatch):
    monkeypatch.setattr(settings, "max_attachment_bytes", 9)

    with pytest.raises(pydantic.ValidationError, match="limit"):
        Attachment(name="big.png", mime_type="image/png", size_bytes=3, data="A" * 16)


def test_attachment_size_must_match_payload():
    Attachment(name="a.txt", mime_type="text/plain", size_bytes=2, data="YWI=")
    with pytest.raises(pydantic.ValidationError, match="decodes to 3 bytes"):
        Attachment(name="a.png", mime_type="image/png", size_bytes=2, data="AAAA")


def test_attachment_is_immutable():
    attachment = Attachment(name="a.txt", mime_type="text/plain", size_bytes=1, data="YQ==")
    assert not attachment.is_image
    with pytest.raises(pydantic.ValidationError):
        attachment.name = "b.txt"


def test_placeholder_keys_are_unset():
    assert clean_api_key("your-openai-key-here") == ""
    assert clean_api_key("sk-real") == "sk-real"


def test_settings_provider_config(monkeypatch):
    for name in ("LLM_PROVIDER", "LLM_MODEL", "OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GEMINI_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LLM_PROVIDER", "anthropic")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant")
    monkeypatch.setenv("OPENAI_API_KEY", "your-key-here")

    config = Settings(_env_file=None).provider_config()

    assert config.provider == "anthropic"
    assert config.model == "claude-sonnet-4-20250514"
    assert config.credentials == {"anthropic": "sk-ant"}
    assert config.api_key() == "sk-ant"


def test_explicit_model_only_applies_to_selected_provider(monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    monkeypatch.setenv("LLM_MODEL", "gpt-4.1")

    configured = Settings(_env_file=None)

    assert configured.get_model() == "gpt-4.1"
    assert configured.get_model("gemini") == "gemini-2.5-flash"
