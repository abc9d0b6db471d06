from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class TranscoderConfig(BaseSettings):
    """FFmpeg configuration for the format normalizer"""

    path: str = "ffmpeg"
    sample_rate: int = Field(default=16000, ge=8000)
    channels: int = Field(default=1, ge=1)
    codec: str = "pcm_s16le"

    model_config = SettingsConfigDict(
        env_prefix="FFMPEG_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class WhisperConfig(BaseSettings):
    """whisper.cpp executable and model configuration"""

    executable: str = "whisper-cli"
    model_path: str = "models/ggml-base.en.bin"
    extra_args: list[str] = Field(default_factory=list)

    model_config = SettingsConfigDict(
        env_prefix="WHISPER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class EmotionClassifierConfig(BaseSettings):
    """Hugging Face inference configuration for sentence emotion scoring."""

    access_token: SecretStr | None = None
    model: str = "bhadresh-savani/bert-base-uncased-emotion"
    api_url: str = "https://router.huggingface.co/hf-inference/models/{model}"
    timeout_seconds: float = Field(default=10.0, gt=0)
    max_attempts: int = Field(default=3, ge=1)
    retry_delay_seconds: float = Field(default=0.5, ge=0)

    @property
    def endpoint(self) -> str:
        """Resolve the inference URL for the configured model."""
        return self.api_url.format(model=self.model)

    model_config = SettingsConfigDict(
        env_prefix="HF_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class AwsConfig(BaseSettings):
    """Default AWS credentials and region"""

    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: str = "us-east-1"

    model_config = SettingsConfigDict(
        env_prefix="AWS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class BedrockConfig(BaseSettings):
    """Amazon Bedrock configuration."""

    region: str = Field(
        default="us-east-1",
        validation_alias="BEDROCK_REGION",
    )
    model_id: str = Field(
        default="amazon.nova-lite-v1:0",
        validation_alias="BEDROCK_MODEL_ID",
    )
    max_tokens: int = Field(
        default=2048,
        validation_alias="BEDROCK_MAX_TOKENS",
        ge=1,
        le=8192,
    )
    temperature: float = Field(
        default=0.2,
        validation_alias="BEDROCK_TEMPERATURE",
        ge=0.0,
        le=1.0,
    )
    top_p: float = Field(
        default=0.9,
        validation_alias="BEDROCK_TOP_P",
        ge=0.0,
        le=1.0,
    )
    api_key: SecretStr | None = Field(
        default=None,
        validation_alias="BEDROCK_API_KEY",
    )
    timeout_seconds: float = Field(
        default=60.0,
        validation_alias="BEDROCK_TIMEOUT_SECONDS",
        gt=0,
    )
    max_json_retries: int = Field(
        default=1,
        validation_alias="BEDROCK_MAX_JSON_RETRIES",
        ge=0,
        le=5,
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Interview Coach Backend"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 5000
    log_file: str = "logs/app.log"
    pipeline_log_file: str = "logs/answer_pipeline.log"
    transcript_log_file: str = "logs/transcripts.log"

    # Temporary answer recordings
    uploads_dir: str = "uploads"
    process_timeout_seconds: float = Field(default=120.0, gt=0)

    # FFmpeg
    ffmpeg: TranscoderConfig = Field(default_factory=TranscoderConfig)

    # Whisper
    whisper: WhisperConfig = Field(default_factory=WhisperConfig)

    # Hugging Face emotion classifier
    emotion: EmotionClassifierConfig = Field(default_factory=EmotionClassifierConfig)

    # AWS
    aws: AwsConfig = Field(default_factory=AwsConfig)

    # Bedrock
    bedrock: BedrockConfig = Field(default_factory=BedrockConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
