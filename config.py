"""
Configuration module for the calculator application.
Store all configuration values as Python constants.

Secrets are resolved in this order:
1. Environment variables
2. An untracked ``config_local.py`` next to this file (see config_local.example.py)
3. The default below
"""

import os


def _first_nonempty(*values: str) -> str:
    for value in values:
        if value:
            return value
    return ""


try:
    import config_local as _config_local  # type: ignore
except ImportError:
    _config_local = None


def _get_local(name: str) -> str:
    if _config_local is None:
        return ""
    return str(getattr(_config_local, name, "") or "")


def _get_env(*names: str) -> str:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return ""


# =============================================================================
# FLASK CONFIGURATION
# =============================================================================

# Secret key for signing the session cookie that carries the calculator session id
# Generate a new one with: python -c "import secrets; print(secrets.token_hex(24))"
SECRET_KEY = _first_nonempty(
    _get_env("SCICALC_SECRET_KEY", "SECRET_KEY"),
    _get_local("SECRET_KEY"),
    "",
)

HOST = "0.0.0.0"
PORT = int(_first_nonempty(_get_env("SCICALC_PORT", "PORT"), "5555"))


# =============================================================================
# CALCULATOR CONFIGURATION
# =============================================================================

# "deg" or "rad"
DEFAULT_ANGLE_UNIT = _first_nonempty(
    _get_env("SCICALC_ANGLE_UNIT"),
    _get_local("DEFAULT_ANGLE_UNIT"),
    "deg",
)

# Keep only the most recent records in the session log
HISTORY_LIMIT = 50

# Sessions kept in memory before the least recently used one is dropped
MAX_SESSIONS = 1000

# Session cookie lifetime (days)
SESSION_LIFETIME_DAYS = 1


# =============================================================================
# ADVANCED MODE - LLM PROVIDER CONFIGURATION
# =============================================================================

# gemini | groq | openrouter
PROVIDER = _first_nonempty(
    _get_env("SCICALC_PROVIDER"),
    _get_local("PROVIDER"),
    "gemini",
)

GEMINI_API_KEY = _first_nonempty(
    _get_env("GEMINI_API_KEY", "API_KEY"),
    _get_local("GEMINI_API_KEY"),
    "",
)

GROQ_API_KEY = _first_nonempty(
    _get_env("GROQ_API_KEY", "SCICALC_GROQ_API_KEY"),
    _get_local("GROQ_API_KEY"),
    "",
)

OPENROUTER_API_KEY = _first_nonempty(
    _get_env("OPENROUTER_API_KEY", "SCICALC_OPENROUTER_API_KEY"),
    _get_local("OPENROUTER_API_KEY"),
    "",
)
OR_SITE_URL = "http://localhost:5555"  # Your site URL for OpenRouter attribution
OR_APP_NAME = "SciCalc Pro"  # App name shown in OpenRouter dashboard

# Default multimodal model per provider
DEFAULT_MODELS = {
    "gemini": "gemini-2.5-flash",
    "groq": "meta-llama/llama-4-scout-17b-16e-instruct",
    "openrouter": "google/gemini-2.5-flash",
}

# Overrides the default model of the configured PROVIDER
ADVANCED_MODEL = _first_nonempty(
    _get_env("SCICALC_MODEL"),
    _get_local("ADVANCED_MODEL"),
    "",
)

ADVANCED_SYSTEM_INSTRUCTION = (
    "You are a specialized computational engine. Provide direct, concise answers "
    "to the user's query. If math is involved, solve it step-by-step but keep it "
    "brief. Do not introduce yourself."
)

ADVANCED_TEMPERATURE = 0.2
ADVANCED_MAX_TOKENS = 2048

# API timeout for advanced requests (seconds)
ADVANCED_TIMEOUT = 60

# Fallback mime type when an image data URL has no usable prefix
DEFAULT_IMAGE_MIME = "image/jpeg"

# Upper bound for the decoded size of an uploaded/pasted image
MAX_IMAGE_SIZE = 5 * 1024 * 1024  # 5MB limit

# Flask request body limit; base64 adds a third on top of the image
MAX_CONTENT_LENGTH = 8 * 1024 * 1024


# =============================================================================
# USER-FACING MESSAGES
# =============================================================================

NO_INPUT_MESSAGE = "No input provided."
NO_RESPONSE_MESSAGE = "No response generated."
MISSING_KEY_MESSAGE = "Configuration Error: API Key is missing. Please check your .env file."
GENERIC_ERROR_MESSAGE = "Error processing request. Please try again later."
CONNECTION_FAILED_INPUT = "System Message"
CONNECTION_FAILED_MESSAGE = (
    "Failed to connect to the intelligent engine. "
    "Please check your network or API configuration."
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_api_key_for_provider(provider=None):
    """
    Get the API key for the specified provider.

    Args:
        provider: Provider name (defaults to PROVIDER constant)

    Returns:
        str: API key for the provider, "" when unknown or unset
    """
    if provider is None:
        provider = PROVIDER

    provider = provider.lower()

    if provider == 'gemini':
        return GEMINI_API_KEY
    elif provider == 'groq':
        return GROQ_API_KEY
    elif provider == 'openrouter':
        return OPENROUTER_API_KEY
    else:
        return ''


def get_model_for_provider(provider=None):
    """Model name for the provider: ADVANCED_MODEL if set for PROVIDER, else its default."""
    if provider is None:
        provider = PROVIDER
    if ADVANCED_MODEL and provider.lower() == PROVIDER.lower():
        return ADVANCED_MODEL
    return DEFAULT_MODELS.get(provider.lower(), "")
