"""
Read and list the local JSON sample files served to the front-end.

Files live in a single directory (settings.JSON_DIR). Parsed files are cached
in memory and invalidated when their modification time changes, so edits show
up without a restart.
"""

import json
import os
import re
from typing import Any, Dict, List
from app.cache import json_cache
from app.core.config import settings

JSON_NAME_RE = re.compile(r"\.json$", re.IGNORECASE)

class InvalidFileName(ValueError):
    pass

def is_valid_json_name(name: str) -> bool:
    """Only plain `*.json` names, nothing that could leave the directory"""
    if not JSON_NAME_RE.search(name):
        return False
    return not (".." in name or "/" in name or "\\" in name)

def read_json_file(name: str) -> Any:
    """
    Return the parsed contents of `name` from the JSON directory.

    Raises InvalidFileName for rejected names; OSError and ValueError from
    reading or parsing propagate after the cache entry is evicted.
    """
    if not is_valid_json_name(name):
        raise InvalidFileName(name)

    path = os.path.join(settings.JSON_DIR, name)
    try:
        mtime = os.stat(path).st_mtime
        cached = json_cache.get(name, mtime)
        if cached is not json_cache.MISSING:
            return cached

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        json_cache.set(name, mtime, data)
        return data
    except (OSError, ValueError):
        json_cache.delete(name)
        raise

def list_json_files() -> List[str]:
    """Sorted names of the regular *.json files; FileNotFoundError if the directory is absent"""
    with os.scandir(settings.JSON_DIR) as entries:
        names = [
            entry.name for entry in entries
            if entry.is_file() and JSON_NAME_RE.search(entry.name)
        ]
    return sorted(names)

def list_json_payload() -> Dict[str, Any]:
    try:
        files = list_json_files()
    except FileNotFoundError:
        return {
            "files": [],
            "count": 0,
            "missing": True,
            "message": "json folder not found. Expected at <projectRoot>/json (create folder and add *.json)"
        }
    return {"files": files, "count": len(files)}
