import logging
import re

import requests

import config

logger = logging.getLogger(__name__)

_DATA_URL_RE = re.compile(r"^data:(.+);base64,(.+)$", re.DOTALL)


class MissingAPIKeyError(RuntimeError):
    """No API Key configured for the selected provider."""


def parse_data_url(data_url):
    """Split ``data:<mime>;base64,<payload>`` into (mime_type, payload).

    A malformed prefix falls back to config.DEFAULT_IMAGE_MIME. A loose
    ``prefix,payload`` string keeps only the payload; anything else is taken
    as raw base64.
    """
    match = _DATA_URL_RE.match(data_url)
    if match:
        return match.group(1), match.group(2)

    data = data_url
    split = data_url.split(',')
    if len(split) > 1:
        data = split[1]
    return config.DEFAULT_IMAGE_MIME, data


def build_parts(text, image_data_url):
    """Ordered request parts: the image first (if any), then the text (if any)."""
    parts = []
    if image_data_url:
        mime_type, data = parse_data_url(image_data_url)
        parts.append({"inlineData": {"mimeType": mime_type, "data": data}})
    if text:
        parts.append({"text": text})
    return parts


class LLMClient:
    def __init__(self, provider=None, model=None):
        self.provider = (provider or config.PROVIDER).lower()
        self.model = model or config.get_model_for_provider(self.provider)
        api_key = config.get_api_key_for_provider(self.provider)

        # Endpoints + headers per provider
        if self.provider == "gemini":
            self.url = f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
            self.headers = {"x-goog-api-key": api_key}
        elif self.provider == "groq":
            self.url = "https://api.groq.com/openai/v1/chat/completions"
            self.headers = {"Authorization": f"Bearer {api_key}"}
        elif self.provider == "openrouter":
            self.url = "https://openrouter.ai/api/v1/chat/completions"
            self.headers = {
                "Authorization": f"Bearer {api_key}",
                "HTTP-Referer": config.OR_SITE_URL,
                "X-Title": config.OR_APP_NAME,
            }
        else:
            raise ValueError(f"Unknown provider: {self.provider}")

        if not api_key:
            raise MissingAPIKeyError(f"API Key not found for provider '{self.provider}'")

    def generate(self, parts, system_instruction, temperature=None, max_tokens=None):
        """Send the parts and return the response text ("" if the reply has none)."""
        if temperature is None:
            temperature = config.ADVANCED_TEMPERATURE
        if max_tokens is None:
            max_tokens = config.ADVANCED_MAX_TOKENS

        if self.provider == "gemini":
            payload = {
                "contents": [{"role": "user", "parts": parts}],
                "systemInstruction": {"parts": [{"text": system_instruction}]},
                "generationConfig": {
                    "temperature": temperature,
                    "maxOutputTokens": max_tokens,
                },
            }
        else:
            payload = {
                "model": self.model,
                "messages": [
                    {"role": "system", "content": system_instruction},
                    {"role": "user", "content": _openai_content(parts)},
                ],
                "temperature": temperature,
                "max_tokens": max_tokens,
            }

        r = requests.post(self.url, json=payload, headers=self.headers, timeout=config.ADVANCED_TIMEOUT)
        r.raise_for_status()
        j = r.json()

        if self.provider == "gemini":
            return _gemini_text(j)
        # OpenAI-compatible shape
        try:
            return j["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError):
            logger.warning("Unexpected response shape from %s: %s", self.provider, str(j)[:200])
            return ""


def _openai_content(parts):
    content = []
    for part in parts:
        if "inlineData" in part:
            inline = part["inlineData"]
            url = f"data:{inline['mimeType']};base64,{inline['data']}"
            content.append({"type": "image_url", "image_url": {"url": url}})
        else:
            content.append({"type": "text", "text": part["text"]})
    return content


def _gemini_text(j):
    try:
        parts = j["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        logger.warning("Gemini response without candidates: %s", str(j)[:200])
        return ""
    return "".join(part.get("text", "") for part in parts)


def generate_advanced_response(text, image_data_url=None):
    """Answer free-form text and/or an image with the configured provider.

    Never raises: failures come back as user-facing messages so the caller can
    log them like any other answer.
    """
    try:
        client = LLMClient()
        parts = build_parts(text, image_data_url)
        if not parts:
            return config.NO_INPUT_MESSAGE

        response = client.generate(parts, config.ADVANCED_SYSTEM_INSTRUCTION)
        return response or config.NO_RESPONSE_MESSAGE
    except MissingAPIKeyError as e:
        logger.error("Computation Error: %s", e)
        return config.MISSING_KEY_MESSAGE
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.exception("Computation Error: %s", e)
        return config.GENERIC_ERROR_MESSAGE
