from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Union

class FetchBatchResponse(BaseModel):
    results: List[Dict[str, Any]] = Field(description="One FetchResult per input URL, in input order")
    count: int
    timeoutMs: Union[int, float] = Field(description="Effective per-URL timeout after clamping")
    concurrency: int = Field(description="Effective worker count after clamping")

class OcrRequest(BaseModel):
    image: Optional[str] = Field(None, description="Data URL or base64 encoded diary image")

class OcrResponse(BaseModel):
    text: str

class ErrorResponse(BaseModel):
    error: str
