"""Preflight check that the service configuration is usable.

Loads the given ``.env`` file, validates ``AppSettings`` and confirms the
Gemini credential is present, without starting the API. Useful as a deploy
hook or container health gate::

    python -m scripts.check_env --env-file /srv/file-insights/.env
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from file_insights.core.config import AppSettings, _load_env_file, require_gemini_api_key
from file_insights.core.exceptions import UnconfiguredCredentialError

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_MISSING_CREDENTIAL = 4
EXIT_RUNTIME_ERROR = 5


def _validate_settings(env_file: Path) -> AppSettings:
    """Ensure settings load from ``env_file`` and carry a Gemini API key."""
    _load_env_file(str(env_file))
    settings = AppSettings()  # type: ignore[call-arg]
    require_gemini_api_key(settings)
    return settings


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate service settings before starting the API."
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        type=Path,
        help="Path to the environment file (default: .env in the repo root).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    env_file: Path = args.env_file

    if not env_file.exists():
        print(
            f"Environment file {env_file} does not exist. "
            "Ensure the path is correct or create it before running this tool.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    try:
        settings = _validate_settings(env_file)
    except ValidationError as exc:
        print(
            "Settings validation failed. Missing or invalid values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR
    except UnconfiguredCredentialError as exc:
        print(f"{exc}. Set it in {env_file} or the environment.", file=sys.stderr)
        return EXIT_MISSING_CREDENTIAL
    except Exception as exc:  # pylint: disable=broad-except
        print(f"Unexpected error during validation: {exc}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    print(
        f"Configuration OK (environment={settings.environment}, "
        f"model={settings.gemini.model_name})."
    )
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
