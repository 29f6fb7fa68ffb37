import math
import re
from typing import Any, Optional, Union
from bs4 import BeautifulSoup

Number = Union[int, float]

MAX_TITLE_LENGTH = 200

# Trailing platform suffixes, e.g. "제목 : 네이버 블로그" or "Title - NAVER Blog"
TITLE_SUFFIX_PATTERNS = [
    re.compile(r"\s*[:：]\s*네이버\s*블로그\s*$", re.IGNORECASE),
    re.compile(r"\s*-\s*네이버\s*블로그\s*$", re.IGNORECASE),
    re.compile(r"\s*[:：]\s*NAVER\s*Blog\s*$", re.IGNORECASE),
    re.compile(r"\s*-\s*NAVER\s*Blog\s*$", re.IGNORECASE),
    re.compile(r"\s*\|\s*.*$"),
]

def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid numeric option
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints beyond float range count as non-finite
        return False

def clamp_number(value: Any, fallback: Number, minimum: Number, maximum: Number) -> Number:
    """Clamp a JSON number into [minimum, maximum], using fallback for non-numbers"""
    if not _is_number(value):
        return fallback
    return min(maximum, max(minimum, value))

def clamp_int(value: Any, fallback: int, minimum: int, maximum: int) -> int:
    """Like clamp_number, but truncates toward zero first"""
    if not _is_number(value):
        return fallback
    return min(maximum, max(minimum, int(value)))

def clean_title(raw: str) -> str:
    """
    Normalize a scraped page title.
    Examples: 'My  post : 네이버 블로그' -> 'My post', 'Docs | Example' -> 'Docs'
    """
    title = re.sub(r"\s+", " ", raw.replace("\u00a0", " ")).strip()
    for pattern in TITLE_SUFFIX_PATTERNS:
        title = pattern.sub("", title)
    return title.strip()

def extract_html_title(html: str) -> Optional[str]:
    """
    Best-effort human readable title of an HTML document.
    Prefers the Open Graph title, falls back to <title>. Returns None if neither
    yields a usable value.
    """
    if not html:
        return None

    soup = BeautifulSoup(html, "html.parser")

    og = soup.find("meta", attrs={"property": "og:title"})
    if og is not None:
        content = og.get("content")
        if content:
            title = clean_title(content)
            if title:
                return title

    if soup.title is not None:
        raw = soup.title.get_text()
        if 0 < len(raw) <= MAX_TITLE_LENGTH:
            title = clean_title(re.sub(r"<[^>]*>", "", raw))
            if title:
                return title

    return None
