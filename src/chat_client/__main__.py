"""Entrypoint: python -m chat_client"""
from __future__ import annotations

from chat_client.cli.main import main

if __name__ == "__main__":
    main()
