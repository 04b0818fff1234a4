#!/usr/bin/env python3
"""
Check that the configured Gemini API key works.

1. List models that support generateContent
2. Show which model the backend would pick
3. Send a one-word test prompt through the same retry loop the backend uses

Usage:
    # Reads GEMINI_API_KEY / GEMINI_MODEL from the environment or from .env
    # in the current working directory (run from the directory holding it)
    python scripts/check_gemini.py

    # Try a specific model instead of discovery:
    python scripts/check_gemini.py --model gemini-1.5-flash
"""

import argparse
import asyncio
import sys

from pdfchat.config import Settings
from pdfchat.modules.generation import GenerationFailed, build_generator
from pdfchat.modules.generation.resolver import select_model


async def run(settings: Settings, prompt: str) -> int:
    generator = build_generator(settings)

    try:
        available = await generator.client.list_generation_models()
        print(f"Models supporting generateContent ({len(available)}):")
        for name in available:
            print(f"  - {name}")

        if settings.gemini_model:
            print(f"\nConfigured override: {settings.gemini_model}")
        elif available:
            print(f"\nDiscovery would select: {select_model(available)}")

        print(f"\nTesting generation with prompt: {prompt!r}")
        text = await generator.generate(prompt)
        print(f"Success ({generator.resolver.cached}): {text.strip()}")
        return 0
    except GenerationFailed as e:
        print(f"Failed [{type(e).__name__}]: {e.detail}", file=sys.stderr)
        return 1
    finally:
        await generator.aclose()


def main():
    parser = argparse.ArgumentParser(description="Gemini API key check")
    parser.add_argument("--model", default=None, help="Override GEMINI_MODEL for this run")
    parser.add_argument("--prompt", default="Say hello in one word", help="Test prompt")
    args = parser.parse_args()

    try:
        settings = Settings()
        if args.model:
            settings = settings.model_copy(update={"gemini_model": args.model})
        sys.exit(asyncio.run(run(settings, args.prompt)))
    except GenerationFailed as e:
        # ConfigurationError lands here before any request is made
        print(f"{e.detail}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
