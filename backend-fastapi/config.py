# config.py
# Configuration settings for the application

import os

from certimport import PipelineConfig


class Settings:
    """Application settings"""

    # Application
    APP_NAME: str = "Certificate Prefill API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = os.getenv("DEBUG", "OFF").upper() == "ON"

    # File upload limits
    MAX_FILE_SIZE: int = int(os.getenv("MAX_FILE_SIZE", str(5 * 1024 * 1024)))  # 5MB
    ALLOWED_EXTENSIONS: set = {
        "p12", "pfx", "pem", "cer", "crt"
    }

    # Prefill texts
    PASSWORD_PROMPT: str = "Enter certificate password (leave blank if none):"
    NOTES_TEMPLATE: str = os.getenv("NOTES_TEMPLATE", "Imported from {filename}")
    GENERIC_FAILURE_MESSAGE: str = "Couldn't read this certificate. You can still enter details manually."
    UNSUPPORTED_FORMAT_MESSAGE: str = "Unsupported file type. Please use .p12, .pfx, .pem, .crt or .cer files."
    FILE_TOO_LARGE_MESSAGE: str = "File too large to parse."

    # Logging
    LOG_LEVEL: str = "DEBUG" if DEBUG else "INFO"

    # CORS
    CORS_ORIGINS: list = os.getenv("CORS_ORIGINS", "*").split(",")

    def pipeline_config(self) -> PipelineConfig:
        return PipelineConfig(
            max_file_size=self.MAX_FILE_SIZE,
            notes_template=self.NOTES_TEMPLATE,
            generic_failure_message=self.GENERIC_FAILURE_MESSAGE,
            unsupported_format_message=self.UNSUPPORTED_FORMAT_MESSAGE,
            file_too_large_message=self.FILE_TOO_LARGE_MESSAGE,
        )

# Global settings instance
settings = Settings()
