"""Run the relay server: ``python -m src``."""

from __future__ import annotations

import uvicorn

from src.server import app
from src.runtime.settings_loader import load_settings


def main() -> None:
    server = load_settings().server
    uvicorn.run(app, host=server.host, port=server.port, reload=False)


if __name__ == "__main__":
    main()
