# src/charms/api/__main__.py
from __future__ import annotations

import uvicorn

from charms.env import load_dotenv_if_present


def main() -> None:
    # Load .env early so CHARMS_* vars exist before anything reads them.
    load_dotenv_if_present()

    # Import after dotenv load (prevents "config read before env" surprises)
    from charms.api.app import create_app
    from charms.runtime.engine_config import load_engine_config

    cfg = load_engine_config()
    uvicorn.run(create_app(config=cfg), host=cfg.api_host, port=cfg.api_port, log_level=cfg.log_level.lower())


if __name__ == "__main__":
    main()
