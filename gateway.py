"""
Starts the chat-completion gateway (src/main.py) under uvicorn.

  python gateway.py

Settings come from the environment:
  HOST, PORT               bind address, default 0.0.0.0:8100
  LOG_LEVEL                default: info
  UVICORN_WORKERS          default: 1 (RELOAD=1 only works with a single worker)
  CONFIG_PATH              provider config, default ./config.json next to this file
  REQUEST_TIMEOUT          seconds per backend call, default: openai sdk default
"""
import logging
import os
import sys
from pathlib import Path

import uvicorn

HERE = Path(__file__).resolve().parent
SRC_DIR = str(HERE / "src")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def run() -> None:
    log_level = os.getenv("LOG_LEVEL", "info")
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    cfg_path = os.environ.setdefault("CONFIG_PATH", str(HERE / "config.json"))
    if not os.path.exists(cfg_path):
        print(f"[gateway] ERROR: config file not found at {cfg_path}. "
              "Copy config.example.json or point CONFIG_PATH at your file.")
        sys.exit(1)

    workers = _env_int("UVICORN_WORKERS", 1)
    reload_opt = workers == 1 and os.getenv("RELOAD", "").lower() in ("1", "true", "yes", "on")
    host, port = os.getenv("HOST", "0.0.0.0"), _env_int("PORT", 8100)

    print(f"[gateway] serving {cfg_path} on {host}:{port} (workers={workers}, reload={reload_opt})")
    uvicorn.run("main:app", app_dir=SRC_DIR, host=host, port=port, log_level=log_level,
                reload=reload_opt, workers=workers)


if __name__ == "__main__":
    run()
