from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from textextract.core.database import get_async_session
from textextract.schemas.common import ApiResponse
from textextract.schemas.settings import SettingsResponse, SettingsUpdate
from textextract.services.settings_service import DEFAULT_THEME, SettingsService, mask_api_key

router = APIRouter(prefix="/settings", tags=["Settings"])


def _to_response(user_id: str, theme: str, api_key: str | None) -> SettingsResponse:
    return SettingsResponse(
        user_id=user_id,
        theme=theme,
        has_openai_api_key=bool(api_key),
        openai_api_key_hint=mask_api_key(api_key),
    )


@router.get("/{user_id}", response_model=ApiResponse[SettingsResponse])
async def get_settings(
    user_id: str,
    db: AsyncSession = Depends(get_async_session),
):
    user_settings = await SettingsService(db).get_settings(user_id)
    if user_settings is None:
        return ApiResponse(data=_to_response(user_id, DEFAULT_THEME, None))
    return ApiResponse(data=_to_response(user_id, user_settings.theme, user_settings.openai_api_key))


@router.put("/{user_id}", response_model=ApiResponse[SettingsResponse])
async def update_settings(
    user_id: str,
    update: SettingsUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    user_settings = await SettingsService(db).update_settings(
        user_id,
        theme=update.theme,
        openai_api_key=update.openai_api_key,
    )
    await db.commit()
    return ApiResponse(data=_to_response(user_id, user_settings.theme, user_settings.openai_api_key))
