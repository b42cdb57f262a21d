"""Configuration management using Pydantic Settings."""

from pathlib import Path
from typing import List, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Google OAuth Configuration
    google_client_id: Optional[str] = None
    google_client_secret: Optional[str] = None
    google_token_uri: str = "https://accounts.google.com/o/oauth2/token"
    google_redirect_uri: str = "urn:ietf:wg:oauth:2.0:oob"

    # Gmail Sync Configuration
    gmail_watch_topic: str = "projects/wavebox-158310/topics/gmail"
    gmail_atom_url: str = "https://mail.google.com/mail/u/0/feed/atom"
    gmail_basic_html_url: str = "https://mail.google.com/mail/u/0/h/1pq68r75kzvdr/?v%3Dlui"
    gmail_thread_list_limit: int = 25

    # Atom feed request headers
    atom_user_agent: str = (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    atom_accept_languages: List[str] = ["en-US", "en"]

    # Spellcheck Configuration
    user_dictionaries_path: Path = Path.home() / ".mailbox_kit" / "dictionaries"
    bundled_dictionaries_path: Optional[Path] = None
    preinstalled_dictionaries: List[str] = ["en_US"]

    # Application Settings
    debug: bool = False
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Global settings instance
settings = Settings()
