import os
from typing import List

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _parse_csv(raw_value: str) -> List[str]:
    return [item.strip() for item in raw_value.split(",") if item.strip()]


class Settings:
    # Project info
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Chat Share Export")
    VERSION: str = os.getenv("VERSION", "1.0.0")

    # API settings
    API_TITLE: str = os.getenv("API_TITLE", f"{PROJECT_NAME} API")

    # CORS settings
    CORS_ORIGINS: List[str] = _parse_csv(
        os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
    )
    CORS_CREDENTIALS: bool = os.getenv("CORS_CREDENTIALS", "true").lower() == "true"
    CORS_METHODS: List[str] = ["*"]
    CORS_HEADERS: List[str] = ["*"]

    # Server settings
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    RELOAD: bool = os.getenv("RELOAD", "true").lower() == "true"

    # Production settings
    ENVIRONMENT_NAME: str = os.getenv("ENVIRONMENT_NAME", "development")

    # Logging settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Share-link limits
    ALLOWED_SHARE_HOSTS: List[str] = _parse_csv(
        os.getenv(
            "ALLOWED_SHARE_HOSTS",
            "chat.openai.com,chatgpt.com,gemini.google.com,g.co,x.ai,grok.com,"
            "claude.ai,lechat.mistral.ai",
        )
    )
    MAX_URL_LENGTH: int = int(os.getenv("MAX_URL_LENGTH", "500"))
    MAX_REDIRECT_HOPS: int = int(os.getenv("MAX_REDIRECT_HOPS", "5"))
    PREFLIGHT_TIMEOUT_SECONDS: float = float(os.getenv("PREFLIGHT_TIMEOUT_SECONDS", "15"))

    # Scraping
    # Remote browser (CDP websocket); a local headless Chromium is launched when empty
    BROWSER_WS_ENDPOINT: str = os.getenv("BROWSER_WS_ENDPOINT", "")
    SCRAPE_TIMEOUT_MS: int = int(os.getenv("SCRAPE_TIMEOUT_MS", "30000"))
    MIN_EXTRACT_LENGTH: int = int(os.getenv("MIN_EXTRACT_LENGTH", "60"))
    MAX_TEXT_LENGTH: int = int(os.getenv("MAX_TEXT_LENGTH", "120000"))
    MAX_EXPORT_URLS: int = int(os.getenv("MAX_EXPORT_URLS", "10"))

    # Transcript parsing: optional JSON file overriding the bundled pattern table
    TRANSCRIPT_PATTERNS_PATH: str = os.getenv("TRANSCRIPT_PATTERNS_PATH", "")

    # PDF rendering: optional TTF font with Hebrew/Arabic coverage (e.g. DejaVuSans.ttf)
    PDF_FONT_PATH: str = os.getenv("PDF_FONT_PATH", "")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT_NAME == "production"


# Create settings instance
settings = Settings()
