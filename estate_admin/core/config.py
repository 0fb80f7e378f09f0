import os
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env.production", ".env"),
        case_sensitive=False,
        extra="allow",
    )

    port: int = int(os.getenv("PORT", 5000))
    api_prefix: str = "/api"
    log_level: str = "INFO"

    # Real-estate REST backend
    api_base_url: str = "http://localhost:3000/"
    request_timeout: Optional[float] = None

    # Persisted client state
    access_token_cookie: str = "access_token"
    access_token_max_age: int = 86400
    session_snapshot_path: str = ".estate_admin/user.json"

    # Project media limits
    max_project_images: int = 10
    max_image_bytes: int = 5 * 1024 * 1024
    wizard_close_delay: float = 2.0

    # CORS
    cors_origins: List[str] = ["*"]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to parse CORS origins from comma-separated string."""

        class CustomEnvSettings(PydanticBaseSettingsSource):
            def get_field_value(self, field, field_name):
                value = env_settings.get_field_value(field, field_name)

                # Parse cors_origins if it's a comma-separated string
                if field_name == "cors_origins" and isinstance(value[0] if value else None, str):
                    return ([v.strip() for v in value[0].split(",") if v.strip()], field_name, False)

                return value

            def __call__(self):
                return env_settings()

        return (
            init_settings,
            CustomEnvSettings(settings_cls),
            dotenv_settings,
            file_secret_settings,
        )


settings = Settings()
