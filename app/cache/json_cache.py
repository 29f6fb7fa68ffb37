from typing import Any, Dict, Tuple

# file name -> (mtime, parsed JSON)
_entries: Dict[str, Tuple[float, Any]] = {}

# Cached JSON may legitimately be null, so misses use a sentinel
MISSING = object()

def get(name: str, mtime: float) -> Any:
    """Return cached data for `name` if it was stored at this exact mtime, else MISSING"""
    entry = _entries.get(name)
    if entry is None or entry[0] != mtime:
        return MISSING
    return entry[1]

def set(name: str, mtime: float, data: Any):
    """Cache parsed JSON for a file name at the given mtime"""
    _entries[name] = (mtime, data)

def delete(name: str):
    _entries.pop(name, None)

def clear_all():
    """Clear all cache entries (for testing)"""
    _entries.clear()

def get_stats() -> Dict[str, Any]:
    """Get cache statistics"""
    return {
        "total_entries": len(_entries),
        "files": sorted(_entries.keys())
    }
