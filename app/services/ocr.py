import base64
import binascii
import re
from typing import Tuple
from app.llm import client as llm_client

DEFAULT_IMAGE_MIME = "image/png"

DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[^,]*)?,(?P<data>.*)$", re.DOTALL)

def decode_image_payload(image: str) -> Tuple[bytes, str]:
    """
    Decode a data URL ('data:image/jpeg;base64,...') or a bare base64 string.
    Raises ValueError if the payload is not valid base64.
    """
    mime_type = DEFAULT_IMAGE_MIME
    payload = image.strip()

    match = DATA_URL_RE.match(payload)
    if match:
        mime_type = match.group("mime") or DEFAULT_IMAGE_MIME
        payload = match.group("data")

    payload = re.sub(r"\s+", "", payload)
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 image data: {e}")

    if not data:
        raise ValueError("Empty image data")
    return data, mime_type

async def extract_text(image: str) -> str:
    """Full diary OCR flow: decode the upload, then transcribe it with the LLM"""
    data, mime_type = decode_image_payload(image)
    print(f"OCR REQUEST: {mime_type}, {len(data)} bytes")
    return await llm_client.extract_diary_text(data, mime_type)
