from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from textextract.core.exceptions import ValidationError
from textextract.core.logging import get_logger
from textextract.models.user_settings import UserSettings

logger = get_logger(__name__)

THEMES = ("light", "dark", "system")
DEFAULT_THEME = "system"


def mask_api_key(api_key: Optional[str]) -> Optional[str]:
    if not api_key:
        return None
    if len(api_key) <= 8:
        return "*" * len(api_key)
    return f"{api_key[:3]}...{api_key[-4:]}"


class SettingsService:
    """Per-user preferences: display theme and a stored generative service key."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_settings(self, user_id: str) -> Optional[UserSettings]:
        result = await self.db.execute(select(UserSettings).where(UserSettings.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_api_key(self, user_id: str) -> Optional[str]:
        user_settings = await self.get_settings(user_id)
        if user_settings is None:
            return None
        return user_settings.openai_api_key or None

    async def update_settings(
        self,
        user_id: str,
        theme: Optional[str] = None,
        openai_api_key: Optional[str] = None,
    ) -> UserSettings:
        """Apply a partial update. An empty ``openai_api_key`` clears the stored key."""
        if theme is not None and theme not in THEMES:
            raise ValidationError(f"Invalid theme '{theme}', expected one of: {', '.join(THEMES)}")

        user_settings = await self.get_settings(user_id)
        if user_settings is None:
            user_settings = UserSettings(user_id=user_id, theme=DEFAULT_THEME)
            self.db.add(user_settings)

        if theme is not None:
            user_settings.theme = theme
        if openai_api_key is not None:
            user_settings.openai_api_key = openai_api_key.strip() or None
            logger.info(f"API key {'stored' if user_settings.openai_api_key else 'cleared'} for user {user_id}")

        await self.db.flush()
        await self.db.refresh(user_settings)
        return user_settings
