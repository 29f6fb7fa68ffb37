import asyncio
import httpx
import pytest
from app.fetch.json_fetcher import (
    NOT_JSON_ERROR,
    TIMEOUT_ERROR,
    fetch_json,
    parse_json_body,
    validate_url
)

def run_fetch(handler, url, timeout_ms=2000, cancel_first=False):
    """Run fetch_json against a MockTransport handler"""
    async def scenario():
        cancel = asyncio.Event()
        if cancel_first:
            cancel.set()
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await fetch_json(client, url, timeout_ms, cancel)

    return asyncio.run(scenario())

def unexpected_request(request):
    raise AssertionError(f"no request expected, got {request.url}")

class TestUrlValidation:
    """Unit tests for URL checks done before any network call"""

    @pytest.mark.parametrize("url,error", [
        ("", "Empty url"),
        ("   ", "Empty url"),
        ("not a url", "Invalid url"),
        ("/relative/path.json", "Invalid url"),
        ("ftp://example.com/data.json", "Only http/https are supported"),
    ])
    def test_rejected_urls(self, url, error):
        """Test rejected URLs produce a failure without a request"""
        result = run_fetch(unexpected_request, url)
        assert result.ok is False
        assert result.error == error
        assert result.status is None
        assert result.url == url

    def test_accepts_http_and_https(self):
        """Test valid URLs pass validation"""
        assert validate_url("https://api.example.com/v1/items")[1] is None
        assert validate_url("  http://example.com  ")[1] is None

class TestJsonParsing:
    """Unit tests for response body parsing"""

    def test_strips_bom_and_whitespace(self):
        """Test leading BOM and surrounding whitespace are ignored"""
        assert parse_json_body('\ufeff  {"a": 1}\n') == {"a": 1}

    def test_rejects_non_standard_constants(self):
        """Test NaN/Infinity are not accepted as JSON"""
        with pytest.raises(ValueError):
            parse_json_body("NaN")
        with pytest.raises(ValueError):
            parse_json_body('{"x": Infinity}')

    def test_rejects_empty_body(self):
        """Test empty body is not JSON"""
        with pytest.raises(ValueError):
            parse_json_body("   ")

class TestFetchJson:
    """Unit tests for fetching and classifying a single URL"""

    def test_success(self):
        """Test 200 JSON response yields a success result"""
        seen = {}

        def handler(request):
            seen["accept"] = request.headers["accept"]
            seen["user_agent"] = request.headers["user-agent"]
            return httpx.Response(200, json={"items": [1, 2, 3]})

        result = run_fetch(handler, "https://api.example.com/items")

        assert result.ok is True
        assert result.status == 200
        assert result.json == {"items": [1, 2, 3]}
        assert seen["accept"] == "application/json, text/json, */*"
        assert seen["user_agent"].startswith("AiMind-FrontEnd/1.0")

    def test_success_wire_form(self):
        """Test success serializes with json even when it is null"""
        result = run_fetch(lambda r: httpx.Response(200, text="null"), "https://api.example.com/null")
        assert result.to_dict() == {
            "url": "https://api.example.com/null",
            "ok": True,
            "status": 200,
            "json": None
        }

    def test_follows_redirects(self):
        """Test redirects are followed to the final JSON"""
        def handler(request):
            if request.url.path == "/old":
                return httpx.Response(302, headers={"Location": "https://api.example.com/new"})
            return httpx.Response(200, json={"moved": True})

        result = run_fetch(handler, "https://api.example.com/old")
        assert result.ok is True
        assert result.json == {"moved": True}

    def test_http_error_with_title(self):
        """Test non-2xx yields HTTP <status> and a scraped title"""
        body = "<html><head><title>Not Found | Example</title></head></html>"
        result = run_fetch(lambda r: httpx.Response(404, text=body), "https://example.com/missing")

        assert result.ok is False
        assert result.status == 404
        assert result.error == "HTTP 404"
        assert result.title == "Not Found"

    def test_http_error_without_title(self):
        """Test wire form omits title when none is found"""
        result = run_fetch(lambda r: httpx.Response(500, text="oops"), "https://example.com/boom")
        assert result.to_dict() == {
            "url": "https://example.com/boom",
            "ok": False,
            "status": 500,
            "error": "HTTP 500"
        }

    def test_not_json(self):
        """Test HTML on 200 yields the not-JSON failure with status and title"""
        body = '<html><head><meta property="og:title" content="날씨 정보 : 네이버 블로그"></head></html>'
        result = run_fetch(lambda r: httpx.Response(200, text=body), "https://blog.example.com/post")

        assert result.ok is False
        assert result.status == 200
        assert result.error == NOT_JSON_ERROR
        assert result.title == "날씨 정보"

    def test_deeply_nested_body_is_not_json(self):
        """Test nesting too deep to decode yields the not-JSON failure"""
        body = "[" * 100000 + "]" * 100000
        result = run_fetch(lambda r: httpx.Response(200, text=body), "https://api.example.com/deep")

        assert result.ok is False
        assert result.status == 200
        assert result.error == NOT_JSON_ERROR
        assert "title" not in result.to_dict()

    def test_timeout(self):
        """Test a slow upstream yields Timeout and no status"""
        async def slow(request):
            await asyncio.sleep(5)
            return httpx.Response(200, json={})

        result = run_fetch(slow, "https://slow.example.com/", timeout_ms=50)

        assert result.ok is False
        assert result.error == TIMEOUT_ERROR
        assert result.status is None
        assert "status" not in result.to_dict()

    def test_cancelled_before_start(self):
        """Test a set cancel event short-circuits without a request"""
        result = run_fetch(unexpected_request, "https://api.example.com/", cancel_first=True)
        assert result.ok is False
        assert result.error == TIMEOUT_ERROR

    def test_cancel_aborts_in_flight_request(self):
        """Test setting the cancel event aborts a pending request"""
        async def scenario():
            cancel = asyncio.Event()

            async def slow(request):
                await asyncio.sleep(5)
                return httpx.Response(200, json={})

            async with httpx.AsyncClient(transport=httpx.MockTransport(slow)) as client:
                task = asyncio.ensure_future(fetch_json(client, "https://slow.example.com/", 10000, cancel))
                await asyncio.sleep(0.05)
                cancel.set()
                return await asyncio.wait_for(task, timeout=2)

        result = asyncio.run(scenario())
        assert result.ok is False
        assert result.error == TIMEOUT_ERROR

    def test_transport_error(self):
        """Test connection failures carry the underlying message"""
        def handler(request):
            raise httpx.ConnectError("Connection refused")

        result = run_fetch(handler, "https://down.example.com/")
        assert result.ok is False
        assert result.error == "Connection refused"
        assert result.status is None
