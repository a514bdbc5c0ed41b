"""
Settings API

Runtime view and update of the provider configuration. Secrets can be
written but are never returned.
"""
import logging
from fastapi import APIRouter

from ..config import clean_api_key, settings
from ..schemas.chat import SettingsResponse, SettingsUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


def _settings_response() -> SettingsResponse:
    return SettingsResponse(
        provider=settings.llm_provider,
        model=settings.get_model(),
        has_api_key=settings.has_api_key(),
        configured_providers=sorted(settings.credentials()),
    )


@router.get("", response_model=SettingsResponse)
async def get_settings():
    """Current provider, model and whether a key is configured."""
    return _settings_response()


@router.patch("", response_model=SettingsResponse)
async def update_settings(data: SettingsUpdate):
    """
    Change provider, model or API keys.

    Applies to turns started after the update; in-flight turns keep
    the configuration they started with.
    """
    updates = data.model_dump(exclude_unset=True)

    if "provider" in updates:
        settings.llm_provider = updates.pop("provider")
    if "model" in updates:
        settings.llm_model = updates.pop("model") or ""
    for field, value in updates.items():
        setattr(settings, field, clean_api_key(value or ""))

    logger.info(f"Settings updated: provider={settings.llm_provider}, model={settings.get_model()}")
    return _settings_response()
