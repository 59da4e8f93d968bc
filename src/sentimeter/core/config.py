"""Configuration management for sentimeter."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings."""

    # Logging
    log_level: str = Field("INFO", description="Logging level")

    # Transport
    request_timeout: float = Field(30.0, description="Seconds to wait for a provider response")

    # Alchemy
    alchemy_api_key: str = Field("", description="AlchemyAPI key")
    alchemy_url: str = Field(
        "http://access.alchemyapi.com/calls/text/TextGetTextSentiment",
        description="AlchemyAPI text sentiment endpoint",
    )

    # Bitext
    bitext_login: str = Field("", description="Bitext user")
    bitext_password: str = Field("", description="Bitext password")
    bitext_url: str = Field("http://svc9.bitext.com/WS_NOps_Val/Service.aspx", description="Bitext endpoint")

    # Chatterbox
    chatterbox_api_key: str = Field("", description="Chatterbox Mashape key")
    chatterbox_url: str = Field(
        "https://chatterbox-analytics-sentiment-analysis-free.p.mashape.com/sentiment/current/classify_text/",
        description="Chatterbox classify endpoint",
    )

    # Repustate
    repustate_api_key: str = Field("", description="Repustate API key")
    repustate_url: str = Field("http://api.repustate.com/v2/", description="Repustate API root")

    # Semantria
    semantria_key: str = Field("", description="Semantria consumer key")
    semantria_secret: str = Field("", description="Semantria consumer secret")
    semantria_url: str = Field("https://api.semantria.com", description="Semantria API root")
    semantria_poll_interval: float = Field(1.0, description="Seconds between processed-document polls")

    # Skyttle
    skyttle_api_key: str = Field("", description="Skyttle Mashape key")
    skyttle_url: str = Field("https://sentinelprojects-skyttle20.p.mashape.com/", description="Skyttle endpoint")

    # Viralheat
    viralheat_api_key: str = Field("", description="Viralheat API key")
    viralheat_url: str = Field(
        "http://www.viralheat.com/api/sentiment/review.json", description="Viralheat review endpoint"
    )

    # Mechanical Turk
    mturk_access_key: str = Field("", description="AWS access key for Mechanical Turk")
    mturk_secret_key: str = Field("", description="AWS secret key for Mechanical Turk")
    mturk_region: str = Field("us-east-1", description="Mechanical Turk region")
    mturk_endpoint_url: str = Field(
        "https://mturk-requester.us-east-1.amazonaws.com",
        description="Requester endpoint (use the sandbox URL for testing)",
    )

    # Analysis settings
    default_language: str = Field("English", description="Language used when none is given")
    default_cut_by: int = Field(300, description="Characters kept per line of a plain-text source")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


# Global settings instance
settings = Settings()
