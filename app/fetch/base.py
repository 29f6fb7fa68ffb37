from dataclasses import dataclass
from typing import Any, Dict, Optional

@dataclass
class FetchResult:
    """
    Outcome of fetching one URL.

    Success carries the parsed JSON body, failure carries an error string and,
    when known, the HTTP status and a page title scraped from the body.
    """
    url: str
    ok: bool
    status: Optional[int] = None
    json: Any = None
    error: Optional[str] = None
    title: Optional[str] = None

    @classmethod
    def success(cls, url: str, status: int, json: Any) -> "FetchResult":
        return cls(url=url, ok=True, status=status, json=json)

    @classmethod
    def failure(
        cls,
        url: str,
        error: str,
        status: Optional[int] = None,
        title: Optional[str] = None
    ) -> "FetchResult":
        return cls(url=url, ok=False, status=status, error=error, title=title)

    def to_dict(self) -> Dict[str, Any]:
        """Wire form: unknown optional fields are omitted, `json` may be null."""
        if self.ok:
            return {"url": self.url, "ok": True, "status": self.status, "json": self.json}

        data: Dict[str, Any] = {"url": self.url, "ok": False}
        if self.status is not None:
            data["status"] = self.status
        data["error"] = self.error
        if self.title:
            data["title"] = self.title
        return data
