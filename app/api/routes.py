from typing import Optional
from fastapi import APIRouter, Query, Request, status
from fastapi.responses import JSONResponse, Response, StreamingResponse
from app.schemas import ErrorResponse, FetchBatchResponse, OcrRequest, OcrResponse
from app.services import local_json, map_key, ocr, openapi_fetch
from app.services.analysis_files import AnalysisFileError, load_analysis_image
from app.cache import json_cache
from app.fetch import image_proxy

router = APIRouter()

@router.post(
    "/api/openapi-fetch",
    response_model=FetchBatchResponse,
    responses={400: {"model": ErrorResponse}}
)
async def openapi_fetch_batch(request: Request, stream: Optional[str] = None):
    """
    Fetch many JSON URLs server-side with bounded concurrency.

    Body: { urls: string[], timeoutMs?: number, concurrency?: number }.
    Returns one envelope with all results, or a text/event-stream of
    meta/result/done events when called with ?stream=1 or
    Accept: text/event-stream. Per-URL failures are reported inside results.
    """
    try:
        body = await request.json()
    except (ValueError, RecursionError):
        # JSONDecodeError, UnicodeDecodeError and the int digit limit are ValueErrors
        return JSONResponse(
            {"error": openapi_fetch.INVALID_BODY_ERROR},
            status_code=status.HTTP_400_BAD_REQUEST
        )

    try:
        fetch_request = openapi_fetch.parse_fetch_request(body)
    except openapi_fetch.InvalidFetchRequest as e:
        return JSONResponse({"error": str(e)}, status_code=status.HTTP_400_BAD_REQUEST)

    streaming = openapi_fetch.wants_stream(stream, request.headers.get("accept"))
    print(
        f"OPENAPI-FETCH {len(fetch_request.urls)} urls, timeout={fetch_request.timeout_ms}ms, "
        f"concurrency={fetch_request.concurrency}, stream={streaming}"
    )

    if not streaming:
        return JSONResponse(await openapi_fetch.run_buffered(fetch_request))

    return StreamingResponse(
        openapi_fetch.stream_events(fetch_request),
        media_type="text/event-stream",
        headers=openapi_fetch.STREAM_HEADERS
    )

@router.get("/api/image-proxy")
async def proxy_image(url: Optional[str] = None):
    """Fetch an image URL server-side and return it as-is (CORS-safe PDF embedding)"""
    if not url or not image_proxy.is_proxyable_url(url):
        return Response("Invalid url", status_code=status.HTTP_400_BAD_REQUEST, media_type="text/plain")

    try:
        image = await image_proxy.fetch_image(url)
    except Exception as e:
        print(f"[image-proxy] {e!r}")
        return Response("Fetch failed", status_code=status.HTTP_502_BAD_GATEWAY, media_type="text/plain")

    if not image.ok:
        return Response("Upstream error", status_code=image.status_code, media_type="text/plain")

    return Response(
        content=image.content,
        media_type=image.content_type,
        headers={"Cache-Control": "private, max-age=3600"}
    )

@router.get("/api/kakao-map-key")
async def kakao_map_key(
    file: Optional[str] = None,
    list_files: Optional[str] = Query(None, alias="list")
):
    """
    Kakao map key resolver.

    Also serves the local JSON samples: ?file=<name>.json returns one file,
    ?list=1 lists the available files.
    """
    if file:
        if not local_json.is_valid_json_name(file):
            return JSONResponse({"error": "Invalid file"}, status_code=status.HTTP_400_BAD_REQUEST)
        try:
            return JSONResponse(local_json.read_json_file(file))
        except (OSError, ValueError) as e:
            return JSONResponse(
                {"error": "Failed to read json file", "file": file, "message": str(e)},
                status_code=status.HTTP_404_NOT_FOUND
            )

    if list_files:
        try:
            return local_json.list_json_payload()
        except OSError as e:
            return JSONResponse(
                {"error": "Failed to list json files", "message": str(e)},
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

    api_key = map_key.resolve_kakao_map_key()
    if not api_key:
        return JSONResponse(
            {
                "error": "API key not configured",
                "expectedAnyOf": map_key.KAKAO_KEY_CANDIDATES,
                "presentKeys": map_key.present_key_names()
            },
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    return {"apiKey": api_key}

@router.get("/api/analysis-result/{filename}")
async def analysis_result_image(filename: str, dir_param: Optional[str] = Query(None, alias="dir")):
    """Serve a rendered analysis image (?dir=test reads from the test directory)"""
    try:
        image = load_analysis_image(filename, dir_param or "")
    except AnalysisFileError as e:
        return Response(e.message, status_code=e.status_code, media_type="text/plain")

    return Response(
        content=image.content,
        media_type=image.content_type,
        headers={"Cache-Control": "no-store"}
    )

@router.post("/api/ocr", response_model=OcrResponse, responses={400: {"model": ErrorResponse}})
async def diary_ocr(request: Request):
    """
    Extract handwritten text from a picture diary image.

    Body: { image: string } as a data URL or bare base64. Unreadable bodies and
    OCR failures share the same 500 error.
    """
    try:
        payload = OcrRequest.model_validate(await request.json())
        if not payload.image:
            return JSONResponse({"error": "이미지가 필요합니다"}, status_code=status.HTTP_400_BAD_REQUEST)

        text = await ocr.extract_text(payload.image)
    except Exception as e:
        print(f"OCR Error: {e}")
        return JSONResponse(
            {"error": "텍스트 추출 중 오류가 발생했습니다"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    return OcrResponse(text=text)

@router.get("/cache/stats")
async def cache_statistics():
    """Get local JSON cache statistics for debugging"""
    return json_cache.get_stats()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "AiMind BFF"}
