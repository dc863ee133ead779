"""Shared helpers for settings components."""

from pathlib import Path

from decouple import AutoConfig

# Repository root: server/settings/components/__init__.py -> parents[3]
BASE_DIR = Path(__file__).resolve().parents[3]

# Reads values from ``config/.env`` first, then from the environment.
config = AutoConfig(search_path=BASE_DIR.joinpath('config'))
