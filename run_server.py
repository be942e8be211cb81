"""Launch the MindCanvus API under Uvicorn.

Environment:

* ``MINDCANVUS_HOST`` / ``MINDCANVUS_PORT``: bind address (``0.0.0.0:8000``).
* ``UVICORN_RELOAD``: auto-reload on code changes; defaults to on only when
  ``ENVIRONMENT`` is ``development``.
* ``UVICORN_LOG_LEVEL``: passed through to Uvicorn (``info``).
"""
from __future__ import annotations

import os
from typing import Any, Mapping

import uvicorn

APP_PATH = "mindcanvus.main:app"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def server_options(env: Mapping[str, str] | None = None) -> dict[str, Any]:
    env = os.environ if env is None else env
    development = env.get("ENVIRONMENT", "development").strip().lower() == "development"
    reload_flag = env.get("UVICORN_RELOAD")
    reload = development if reload_flag is None else reload_flag.strip().lower() in _TRUE_VALUES

    raw_port = env.get("MINDCANVUS_PORT", "8000")
    try:
        port = int(raw_port)
    except ValueError as exc:
        raise SystemExit(f"MINDCANVUS_PORT must be an integer, got {raw_port!r}") from exc

    return {
        "app": APP_PATH,
        "host": env.get("MINDCANVUS_HOST", "0.0.0.0"),
        "port": port,
        "reload": reload,
        "log_level": env.get("UVICORN_LOG_LEVEL", "info").lower(),
    }


def main() -> None:
    uvicorn.run(**server_options())


if __name__ == "__main__":
    main()
