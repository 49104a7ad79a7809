from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def new_state() -> Dict[str, Any]:
    return {
        "host": {},
        "execution": {
            "current_step": None,
            "mounts": {},
            "decisions": {},
            "summary": {},
            "errors": [],
        },
    }


def save_state(path: str, state: Dict[str, Any]) -> None:
    """Write the run report; the installer never reads it back."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    fmt = _detect_format(p)
    if fmt in {"yaml", "yml"}:
        try:
            import yaml  # type: ignore
        except Exception as e:  # pragma: no cover
            raise RuntimeError("YAML report requested but PyYAML is not available") from e
        p.write_text(yaml.safe_dump(state, sort_keys=False), encoding="utf-8")
    else:
        p.write_text(json.dumps(state, indent=2, sort_keys=True, default=str) + "\n", encoding="utf-8")
    logger.info("Wrote run report %s", str(p))
