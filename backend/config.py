from typing import Dict, List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Supabase
    supabase_url: str = "http://localhost:54321"
    supabase_key: str = ""

    # JWT
    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    # CORS
    allowed_origins: List[str] = ["http://localhost:3000"]

    # Product catalog converter
    categories_url: str = ""
    category_confidence_threshold: int = 40
    csv_input_preview_chars: int = 100

    # Model routing
    default_model: str = "meta-llama/Llama-4-Maverick-17B-128E-Instruct-FP8"
    fast_model: str = "deepseek-ai/DeepSeek-V3"
    browsing_model: str = "meta-llama/Llama-4-Maverick-17B-128E-Instruct-FP8"
    language_models: Dict[str, str] = {}
    content_type_models: Dict[str, str] = {}


settings = Settings()
