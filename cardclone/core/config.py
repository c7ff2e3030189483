"""Configuration management for the business card clone service."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # In sandboxed environments, .env might not be accessible
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    # Supabase configuration (required)
    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(..., description="Supabase service role key")

    # OpenAI configuration (required)
    OPENAI_API_KEY: str = Field(..., description="OpenAI API key")

    # Primary subject of this deployment (required)
    OWNER_ID: str = Field(..., description="owner_id of the profile the chat persona represents")

    # Environment
    CARDCLONE_ENV: str = Field(default="dev", description="Environment: dev, staging, prod, test")

    # Chat pipeline
    CHAT_MODEL: str = Field(default="gpt-4o-mini", description="Model for chat replies")
    CHAT_TIMEOUT_SECONDS: float = Field(default=30.0, description="Timeout for one generation call")
    RETRIEVAL_TOP_K: int = Field(default=2, description="Knowledge snippets included per reply")
    PERSONA_NAME: str = Field(default="정이노", description="Name the chat persona speaks as")
    COMPANY_REPRESENTATIVE: str = Field(
        default="정민기", description="Profile name addressed with the representative honorific"
    )
    DISPLAY_TIMEZONE: str = Field(default="Asia/Seoul", description="Timezone for the prompt clock")
    PERSIST_ASSISTANT_TURNS: bool = Field(
        default=False, description="Also store assistant replies in chat_history"
    )

    # Knowledge ingestion
    MAX_UPLOAD_BYTES: int = Field(default=10 * 1024 * 1024, description="Max document upload size")
    CHUNK_MAX_CHARS: int = Field(default=1000, description="Max characters per knowledge chunk")
    KEYWORDS_PER_CHUNK: int = Field(default=10, description="Keyword tags stored per chunk")

    # Speech
    STT_MODEL: str = Field(default="whisper-1", description="OpenAI transcription model")
    MAX_AUDIO_BYTES: int = Field(default=25 * 1024 * 1024, description="Max audio upload size")
    ELEVENLABS_API_KEY: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ELEVENLABS_API_KEY", "ELEVEN_LABS_API_KEY"),
        description="ElevenLabs API key",
    )
    ELEVENLABS_VOICE_ID: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ELEVENLABS_VOICE_ID", "ELEVEN_LABS_VOICE_ID"),
        description="ElevenLabs voice ID",
    )

    # Translation
    DEEPL_API_KEY: str | None = Field(default=None, description="DeepL API key")
    DEEPL_API_URL: str = Field(
        default="https://api-free.deepl.com/v2/translate", description="DeepL translate endpoint"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    return Settings()
