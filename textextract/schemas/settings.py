from typing import Literal, Optional

from pydantic import BaseModel


class SettingsUpdate(BaseModel):
    theme: Optional[Literal["light", "dark", "system"]] = None
    openai_api_key: Optional[str] = None


class SettingsResponse(BaseModel):
    user_id: str
    theme: str
    has_openai_api_key: bool
    openai_api_key_hint: Optional[str] = None
