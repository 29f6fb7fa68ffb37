import os
from dataclasses import dataclass
from urllib.parse import unquote
from app.core.config import settings

CONTENT_TYPE_BY_EXT = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}

class AnalysisFileError(Exception):
    """Rejected request for an analysis image; carries the HTTP status and message"""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

@dataclass
class AnalysisImage:
    content: bytes
    content_type: str

def safe_file_name(raw_name: str) -> str:
    """Decode `raw_name` and make sure it names a file directly inside the directory"""
    name = unquote(raw_name or "")
    if (
        not name
        or name in (".", "..")
        or "\\" in name
        or os.path.basename(name) != name
    ):
        raise AnalysisFileError(400, "Invalid filename")
    return name

def result_dir(dir_param: str) -> str:
    if (dir_param or "").lower() == "test":
        return settings.ANALYSIS_TEST_DIR
    return settings.ANALYSIS_RESULT_DIR

def load_analysis_image(raw_name: str, dir_param: str = "") -> AnalysisImage:
    """Load a rendered analysis image (jpg/png) from the result or test directory"""
    name = safe_file_name(raw_name)

    ext = os.path.splitext(name)[1].lower()
    if ext not in CONTENT_TYPE_BY_EXT:
        raise AnalysisFileError(400, "Unsupported file type")

    path = os.path.join(result_dir(dir_param), name)
    try:
        with open(path, "rb") as f:
            content = f.read()
    except OSError:
        raise AnalysisFileError(404, "File not found")

    return AnalysisImage(content=content, content_type=CONTENT_TYPE_BY_EXT[ext])
