from typing import Any, Dict, List, Optional

from pydantic import AnyHttpUrl, BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class SlotDefinition(BaseModel):
    """
    Configuration of a single slot role. Unset values fall back to the
    global defaults in `Settings`.
    """
    content_model: Optional[str] = None
    slot_role_layout: Optional[Dict[str, Any]] = None


class Settings(BaseSettings):
    # Slot roles to register, keyed by role name
    defined_slots: Dict[str, SlotDefinition] = Field(default_factory=dict)
    default_content_model: str = "wikitext"
    default_slot_role_layout: Dict[str, Any] = Field(
        default_factory=lambda: {
            "display": "none",
            "region": "center",
            "placement": "append",
        }
    )

    # Slots whose semantic data is folded into the page's data
    semantic_slots: List[str] = Field(default_factory=list)

    # Null edit after every changing slot edit
    do_purge: bool = False

    jwt_secret: SecretStr = SecretStr("")
    jwt_algo: str = "HS256"

    host: str = "127.0.0.1"
    port: int = 8000

    # Remote wiki used by wiki.api_client
    mw_api_base_url: Optional[AnyHttpUrl] = None
    mw_bot_username: Optional[str] = None
    mw_bot_password: Optional[SecretStr] = None

    model_config = SettingsConfigDict(
        env_prefix="WSSLOTS_",
        env_file=".env",
        extra="ignore",
    )

settings = Settings()
