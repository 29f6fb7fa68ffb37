import asyncio
from typing import Optional
from app.core.config import settings

NO_TEXT_FOUND = "텍스트를 찾을 수 없습니다"

DIARY_OCR_PROMPT = f"""이 이미지는 아이가 그린 그림일기입니다. 이미지에서 손글씨로 작성된 모든 텍스트를 정확하게 추출해주세요.

규칙:
1. 아이의 글씨체를 고려하여 최대한 정확하게 인식해주세요
2. 맞춤법 오류가 있어도 원본 그대로 추출해주세요
3. 줄바꿈은 유지해주세요
4. 날짜, 제목, 본문 등 모든 텍스트를 포함해주세요
5. 텍스트가 없거나 읽을 수 없는 경우 "{NO_TEXT_FOUND}"라고 응답해주세요

추출된 텍스트만 응답해주세요. 다른 설명은 필요 없습니다."""

def get_gemini_model():
    """Get configured Gemini model"""
    if not settings.GOOGLE_API_KEY:
        raise ValueError("GOOGLE_API_KEY not set")

    try:
        import google.generativeai as genai  # lazy import keeps startup light
    except Exception as e:
        raise ImportError("google-generativeai package is required to use Gemini client") from e

    genai.configure(api_key=settings.GOOGLE_API_KEY)
    return genai.GenerativeModel(settings.LLM_MODEL)

def _clean_response_text(text: str) -> str:
    content = text.strip()
    # Models sometimes wrap plain text in a fenced block
    if content.startswith("```"):
        content = content.split("\n", 1)[1] if "\n" in content else ""
    if content.endswith("```"):
        content = content[:-3]
    return content.strip()

async def extract_diary_text(image_data: bytes, mime_type: str) -> str:
    """
    Transcribe the handwriting in a child's picture diary with Gemini vision.
    Returns the text verbatim, or NO_TEXT_FOUND when the model reads nothing.
    """
    if settings.USE_MOCK:
        return await _mock_extract_diary_text(image_data, mime_type)

    model = get_gemini_model()
    parts = [DIARY_OCR_PROMPT, {"mime_type": mime_type, "data": image_data}]

    max_attempts = max(1, settings.LLM_MAX_ATTEMPTS)
    last_error: Optional[Exception] = None
    for attempt in range(max_attempts):
        try:
            print(f"OCR ATTEMPT {attempt+1}/{max_attempts}: image={len(image_data)} bytes, timeout={settings.LLM_TIMEOUT_SECONDS}s")
            response = await asyncio.wait_for(
                model.generate_content_async(parts),
                timeout=settings.LLM_TIMEOUT_SECONDS
            )

            if not response.text:
                raise ValueError("Empty response from Gemini")

            return _clean_response_text(response.text) or NO_TEXT_FOUND

        except Exception as e:
            last_error = e
            # Retry on timeouts or transient errors
            msg = str(e).lower()
            is_timeout = isinstance(e, asyncio.TimeoutError) or "timeout" in msg or "504" in msg or "deadline" in msg
            if attempt < max_attempts - 1 and is_timeout:
                backoff = 0.7 * (attempt + 1)
                print(f"OCR TIMEOUT/TRANSIENT ERROR, retrying in {backoff:.1f}s... ({e!r})")
                await asyncio.sleep(backoff)
                continue
            break

    raise Exception(f"Gemini OCR failed: {str(last_error) if last_error else 'Unknown error'}")

async def _mock_extract_diary_text(image_data: bytes, mime_type: str) -> str:
    """Mock implementation for testing without LLM API"""
    return "2025년 5월 5일 날씨: 맑음\n오늘은 엄마랑 공원에 갔다.\n그네를 타서 정말 재미있었다."
