"""Game settings: defaults, an optional JSON settings file, then TICTACTOE_* environment overrides."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .board import MARKERS, other_marker
from .engine import DEFAULT_SCORE_LIMIT
from .strategy import DEFAULT_FALLIBILITY

logger = logging.getLogger(__name__)

ENV_PREFIX = "TICTACTOE_"
SETTINGS_ENV = ENV_PREFIX + "SETTINGS"
MAX_SCORE_LIMIT = 10


@dataclass
class GameSettings:
    score_limit: int = DEFAULT_SCORE_LIMIT
    fallibility: float = DEFAULT_FALLIBILITY
    human_marker: str = "X"
    first_to_move: str = "X"
    computer_delay: float = 0.75
    clear_screen: bool = True
    seed: Optional[int] = None

    @property
    def computer_marker(self) -> str:
        return other_marker(self.human_marker)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_settings(path: Path, defaults: Dict[str, Any]) -> Dict[str, Any]:
    """
    Load settings from ``path`` merging with ``defaults``.

    Returns defaults if the file is missing or invalid.
    """
    data = dict(defaults)
    if not path.exists():
        return data
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring settings file %s (%s)", path, exc)
        return data
    if isinstance(raw, dict):
        for key, value in raw.items():
            if key in data:
                data[key] = value
            else:
                logger.warning("Unknown setting %r in %s", key, path)
    return data


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, str]:
    overrides = {}
    for f in fields(GameSettings):
        key = ENV_PREFIX + f.name.upper()
        if key in environ:
            overrides[f.name] = environ[key]
    return overrides


def _coerce_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "on"}:
        return True
    if text in {"0", "false", "no", "off", ""}:
        return False
    return default


def _coerce_number(value: Any, default: Any, kind: type) -> Any:
    try:
        return kind(value)
    except (TypeError, ValueError):
        logger.warning("Bad value %r, using %r", value, default)
        return default


def coerce_settings(data: Mapping[str, Any]) -> GameSettings:
    """Build GameSettings from loose values, falling back per field and clamping ranges."""
    base = GameSettings()
    score_limit = _coerce_number(data.get("score_limit", base.score_limit), base.score_limit, int)
    fallibility = _coerce_number(data.get("fallibility", base.fallibility), base.fallibility, float)
    delay = _coerce_number(data.get("computer_delay", base.computer_delay), base.computer_delay, float)

    human_marker = str(data.get("human_marker", base.human_marker)).upper()
    if human_marker not in MARKERS:
        human_marker = base.human_marker
    first = str(data.get("first_to_move", base.first_to_move)).upper()
    if first not in MARKERS:
        first = base.first_to_move

    seed = data.get("seed", base.seed)
    if seed is not None and seed != "":
        seed = _coerce_number(seed, None, int)
    else:
        seed = None

    return GameSettings(
        score_limit=min(max(1, score_limit), MAX_SCORE_LIMIT),
        fallibility=min(max(0.0, fallibility), 1.0),
        human_marker=human_marker,
        first_to_move=first,
        computer_delay=max(0.0, delay),
        clear_screen=_coerce_bool(data.get("clear_screen", base.clear_screen), base.clear_screen),
        seed=seed,
    )


def resolve_settings(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> GameSettings:
    environ = os.environ if environ is None else environ
    path = path or environ.get(SETTINGS_ENV)
    data = GameSettings().as_dict()
    if path:
        data = load_settings(Path(path), data)
    data.update(_env_overrides(environ))
    return coerce_settings(data)
