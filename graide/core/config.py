import os
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="GRAIDE_", env_file=None)

    env: str = os.getenv("ENV", "unit-test")
    sheets_api_base: str = "https://sheets.googleapis.com/v4/spreadsheets"
    drive_api_base: str = "https://www.googleapis.com/drive/v3"
    spreadsheet_name: str = "graide-data"
    organized_folder_name: str = "organized"
    workspace_state_path: str = ".graide/workspace.json"
    http_timeout: float = 30.0
    log_level: str = "INFO"
    service_token: str | None = None
    reconcile_on_startup: bool = True
    cors_origins: str = "*"

settings = Settings()
