from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Required from environment (.env / deployment secrets)
    database_url: str
    identity_jwt_key: str  # PEM public key (RS256) or shared secret (HS256) of the identity provider
    identity_jwt_algorithms: str = "RS256"  # comma-separated
    identity_issuer: str | None = None
    identity_audience: str | None = None
    identity_email_claim: str = "email"
    app_env: str = "development"  # development, staging, production

    # Vapi voice-AI provider
    vapi_api_key: str | None = None
    vapi_assistant_id: str | None = None
    vapi_base_url: str = "https://api.vapi.ai"
    vapi_phone_number_id: str | None = None  # only needed for phone calls
    vapi_timeout_seconds: float = 30.0

    # Dynamic interviewer assistant
    interview_company_brand: str = "Entrevisto"
    interview_llm_provider: str = "openai"
    interview_llm_model: str = "gpt-4o"
    interview_llm_temperature: float = 0.7
    interview_llm_max_tokens: int = 80
    interview_voice_provider: str = "azure"
    interview_voice_id: str = "en-US-JennyNeural"
    interview_transcriber_provider: str = "deepgram"
    interview_transcriber_model: str = "nova-2-general"

    # Resume blob store (S3 bucket)
    aws_region: str = "us-west-2"
    resume_bucket: str = "entrevisto-resumes"
    resume_public_base_url: str | None = None  # e.g. CDN in front of the bucket

    # CORS origins as comma-separated values
    # Example: "https://app.example.com,https://admin.example.com"
    cors_allow_origins: str = "http://localhost:3000"

    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    # Upload and request guards
    max_resume_upload_mb: int = 10
    min_resume_text_chars: int = 100
    rate_limit_upload_per_min: int = 10
    rate_limit_interview_start_per_min: int = 5

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def identity_algorithm_list(self) -> list[str]:
        return [a.strip() for a in self.identity_jwt_algorithms.split(",") if a.strip()]


settings = Settings()
