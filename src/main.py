#!/usr/bin/env python3
"""Run the dashboard API with uvicorn."""

import uvicorn

from src.config.settings import DashboardSettings


def main() -> None:
    settings = DashboardSettings.from_env()
    uvicorn.run("src.app:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
