"""JSON-lines audit trail for prospecting, lead imports and backups.

Each event goes to the ``partnerhub.audit`` logger and, when an audit directory
is configured, is appended to ``<channel>-YYYY-MM-DD.jsonl`` in that directory
so an operator can replay what the oracle returned and what was accepted.
"""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from partnerhub import settings

logger = logging.getLogger("partnerhub.audit")

_LEVELS = {"debug": logging.DEBUG, "info": logging.INFO, "warn": logging.WARNING, "error": logging.ERROR}


def _day_file(channel: str, when: datetime) -> Optional[Path]:
    base = settings.AUDIT_LOG_DIR
    if base is None:
        return None
    try:
        base.mkdir(parents=True, exist_ok=True)
    except OSError:
        return None
    return base / f"{channel}-{when:%Y-%m-%d}.jsonl"


def log_json(channel: str, level: str, event: str, data: Optional[Dict[str, Any]] = None) -> None:
    when = datetime.now(timezone.utc)
    record: Dict[str, Any] = {
        "timestamp": when.strftime("%Y-%m-%dT%H:%M:%SZ"),
        "level": level,
        "channel": channel,
        "event": event,
    }
    if data:
        record["data"] = data
    line = json.dumps(record, ensure_ascii=False, default=str)
    logger.log(_LEVELS.get(level, logging.INFO), line)

    path = _day_file(channel, when)
    if path is None:
        return
    try:
        with path.open("a", encoding="utf-8") as fh:
            fh.write(line + "\n")
    except OSError as exc:
        # The audit file is a copy; the logger line above already carries the event
        logger.warning("audit write failed path=%s: %s", path, exc)
