"""Local-only overrides (DO NOT COMMIT real secrets).

Usage:
- Copy this file to `config_local.py`
- Fill in your local secrets/credentials

`config.py` will read these values if present.
Environment variables still take precedence.
"""

# Flask secret key (optional)
# SECRET_KEY = "your_flask_secret_key"

# Advanced mode provider: gemini | groq | openrouter
# PROVIDER = "gemini"
# ADVANCED_MODEL = "gemini-2.5-flash"

# LLM provider keys (optional)
# GEMINI_API_KEY = "your_gemini_key"
# GROQ_API_KEY = "your_groq_key"
# OPENROUTER_API_KEY = "your_openrouter_key"

# "deg" or "rad"
# DEFAULT_ANGLE_UNIT = "deg"
