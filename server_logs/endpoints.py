import os
from datetime import datetime
from pathlib import Path
from typing import Iterator

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import PlainTextResponse

router = APIRouter(prefix="/admin/logs", tags=["logs"])

LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
ALLOWED_LOG_TYPES = ("server", "decks", "reference")
LOG_TYPE_PATTERN = "^(" + "|".join(ALLOWED_LOG_TYPES) + ")$"


def get_log_path(log_type: str) -> Path:
    return LOG_DIR / f"{log_type}.log"


def _iter_lines(log_path: Path) -> Iterator[str]:
    with open(log_path, encoding="utf-8") as f:
        yield from f


def _missing(log_type: str) -> dict:
    return {"lines": [], "error": f"No {log_type} log file", "log_type": log_type}


@router.get("/tail")
async def tail_logs(
    log_type: str = Query("server", pattern=LOG_TYPE_PATTERN),
    lines: int = Query(50, ge=1, le=500)
):
    """Last N lines of a log."""
    log_path = get_log_path(log_type)
    if not log_path.exists():
        return _missing(log_type)
    all_lines = list(_iter_lines(log_path))
    return {"lines": all_lines[-lines:], "count": len(all_lines), "log_type": log_type}


@router.get("/head")
async def head_logs(
    log_type: str = Query("server", pattern=LOG_TYPE_PATTERN),
    lines: int = Query(50, ge=1, le=500)
):
    """First N lines of a log."""
    log_path = get_log_path(log_type)
    if not log_path.exists():
        return _missing(log_type)
    head = []
    for line in _iter_lines(log_path):
        if len(head) >= lines:
            break
        head.append(line)
    return {"lines": head, "log_type": log_type}


@router.get("/search")
async def search_logs(
    log_type: str = Query("server", pattern=LOG_TYPE_PATTERN),
    level: str = None,
    contains: str = None,
    limit: int = Query(100, ge=1, le=1000)
):
    """Filter a log by level and/or a case-insensitive substring."""
    log_path = get_log_path(log_type)
    if not log_path.exists():
        return _missing(log_type)

    level_marker = f'"level": "{level}"' if level else None
    needle = contains.lower() if contains else None
    matches = []
    for line in _iter_lines(log_path):
        if level_marker and level_marker not in line:
            continue
        if needle and needle not in line.lower():
            continue
        matches.append(line.strip())
        if len(matches) >= limit:
            break
    return {"lines": matches, "count": len(matches), "log_type": log_type}


@router.get("/available")
async def list_available_logs():
    if not LOG_DIR.exists():
        return {"logs": []}
    return {"logs": [
        {
            "name": f.stem,
            "size_bytes": f.stat().st_size,
            "modified": datetime.fromtimestamp(f.stat().st_mtime).isoformat()
        }
        for f in sorted(LOG_DIR.glob("*.log"))
    ]}


@router.get("/raw/{log_type}")
async def get_raw_log(log_type: str):
    """Whole log file as plain text."""
    if log_type not in ALLOWED_LOG_TYPES:
        raise HTTPException(400, f"Invalid log type. Allowed: {list(ALLOWED_LOG_TYPES)}")
    log_path = get_log_path(log_type)
    if not log_path.exists():
        raise HTTPException(404, f"No {log_type} log file")
    return PlainTextResponse(log_path.read_text(encoding="utf-8"))
