"""Environment-driven settings for the dashboard core and batch entrypoint."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_INPUT_PATH = PROJECT_ROOT / "data" / "sample_dataset.json"
DEFAULT_OUTPUT_DIR = PROJECT_ROOT / "output"
DEFAULT_BLOCK_RATE_WARNING = 10.0


def _parse_block_rate_warning() -> float:
    raw = os.getenv("AAR_BLOCK_RATE_WARNING", str(DEFAULT_BLOCK_RATE_WARNING))
    try:
        threshold = float(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid AAR_BLOCK_RATE_WARNING: {raw}") from exc
    if threshold < 0 or threshold > 100:
        raise ValueError(f"AAR_BLOCK_RATE_WARNING must be in [0, 100], got {threshold}")
    return threshold


def _parse_log_level() -> str:
    raw = os.getenv("AAR_LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(logging.getLevelName(raw), int):
        raise ValueError(f"Invalid AAR_LOG_LEVEL: {raw}")
    return raw


@dataclass(frozen=True)
class Settings:
    input_path: Path
    output_dir: Path
    block_rate_warning: float
    log_level: str

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            input_path=Path(os.getenv("AAR_INPUT_PATH", str(DEFAULT_INPUT_PATH))),
            output_dir=Path(os.getenv("AAR_OUTPUT_DIR", str(DEFAULT_OUTPUT_DIR))),
            block_rate_warning=_parse_block_rate_warning(),
            log_level=_parse_log_level(),
        )


BLOCK_RATE_WARNING = _parse_block_rate_warning()
