import os
from typing import List, Mapping, Optional

# Checked in this order; the first non-empty value wins
KAKAO_KEY_CANDIDATES = (
    "NEXT_PUBLIC_KAKAO_MAP_APP_KEY",
    "NEXT_PUBLIC_KAKAO_JAVASCRIPT_KEY",
    "NEXT_PUBLIC_KAKAO_JAVASCRIPT_API_KEY",
    "NEXT_PUBLIC_KAKAO_JS_KEY",
    "NEXT_PUBLIC_KAKAO_APP_KEY",
    "KAKAO_MAP_API_KEY",
    "KAKAO_MAP_APP_KEY",
    "NEXT_PUBLIC_KAKAO_MAP_API_KEY",
    "KAKAO_API_KEY",
    "KAKAO_JAVASCRIPT_KEY",
    "KAKAO_JAVASCRIPT_API_KEY",
    "KAKAO_JS_KEY",
    "KAKAO_APP_KEY",
    "KAKAO_MAP_KEY",
    "KAKAO_KEY",
    "NEXT_PUBLIC_KAKAO_MAP_KEY",
    "NEXT_PUBLIC_KAKAO_KEY",
)

def resolve_kakao_map_key(environ: Optional[Mapping[str, str]] = None) -> str:
    """Return the Kakao map JavaScript key with quotes stripped, or '' if none is set"""
    env = os.environ if environ is None else environ
    raw = next((env[name] for name in KAKAO_KEY_CANDIDATES if env.get(name)), "")
    return raw.replace('"', "").replace("'", "").strip()

def present_key_names(environ: Optional[Mapping[str, str]] = None) -> List[str]:
    env = os.environ if environ is None else environ
    return [name for name in KAKAO_KEY_CANDIDATES if env.get(name)]
