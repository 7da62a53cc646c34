#!/usr/bin/env python3
"""Check the advanced-mode provider configuration with one live request."""

import sys

import config
from providers import LLMClient, MissingAPIKeyError, build_parts


def check_llm_connection():
    """Return True if the configured provider answers a trivial prompt."""

    print("=" * 60)
    print("Advanced Mode Connection Check")
    print("=" * 60)
    print(f"Provider: {config.PROVIDER}")
    print(f"Model: {config.get_model_for_provider()}")
    print("-" * 60)

    try:
        print("Initializing LLM client...")
        client = LLMClient()
        print(f"✓ Client initialized successfully")
        print(f"  URL: {client.url}")

        print("\nTesting completion...")
        response = client.generate(build_parts("What is 6 times 7?", None),
                                   config.ADVANCED_SYSTEM_INSTRUCTION,
                                   max_tokens=100)

        print(f"✓ Completion successful!")
        print(f"  Response: {response}")
        print("\n" + "=" * 60)
        print("✓ Advanced mode is working!")
        print("=" * 60)
        return True

    except MissingAPIKeyError as e:
        print(f"\n✗ CONFIGURATION ERROR: {e}")
        print("\nSet the key for your provider, e.g. GEMINI_API_KEY, or add it to config_local.py")
        return False
    except Exception as e:
        print(f"\n✗ ERROR: {str(e)}")
        print("\n" + "=" * 60)
        print("✗ CHECK FAILED - Check your API key and network")
        print("=" * 60)
        return False


if __name__ == "__main__":
    success = check_llm_connection()
    sys.exit(0 if success else 1)
