"""Client configuration with environment variable loading.

Pydantic-based configuration for the chat client and its backend connection.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file
load_dotenv()


class ClientConfig(BaseModel):
    """Configuration for the chat client.

    Attributes:
        api_base_url: Base URL of the conversational backend.
        request_timeout: Seconds to wait for a backend response.
        storage_secret: Secret used by NiceGUI to sign browser storage.
        host: Interface the UI server binds to.
        port: Port the UI server listens on.
        run_mode: "client" for the UI only, "integrated" to also mount the
            reference backend on the same server.
    """

    model_config = ConfigDict(validate_default=True)

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("ATTRANGI_API_URL", "http://localhost:8000"),
        description="Conversational backend base URL",
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("ATTRANGI_REQUEST_TIMEOUT", "60")),
        ge=1.0,
        le=600.0,
        description="Backend request timeout in seconds",
    )
    storage_secret: str = Field(
        default_factory=lambda: os.getenv("NICEGUI_STORAGE_SECRET", "attrangi-secret"),
        description="Secret for NiceGUI browser storage",
    )
    host: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "8080")), ge=1, le=65535)
    run_mode: str = Field(
        default_factory=lambda: os.getenv("RUN_MODE", "client").lower(),
        pattern="^(client|integrated)$",
    )

    @field_validator("api_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and drop trailing slashes."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                "Backend URL must start with http:// or https://. Set ATTRANGI_API_URL in .env"
            )
        return v.rstrip("/")


def get_client_config() -> ClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ClientConfig instance.

    Raises:
        ValueError: If the backend URL is invalid.
    """
    return ClientConfig()
