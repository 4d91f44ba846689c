import httpx
import pytest

from treepick.infrastructure.error_handler import ApiError, NotFoundError
from treepick.services.download import DownloadService

pytestmark = pytest.mark.asyncio


def make_service(handler) -> DownloadService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return DownloadService(client)


async def test_fetch_content_returns_bytes():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b'{"name": "widgets"}')

    content = await make_service(handler).fetch_content(
        "https://raw.githubusercontent.com/acme/widgets/main/package.json"
    )
    assert content == b'{"name": "widgets"}'


async def test_fetch_to_file_creates_parents(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/acme/widgets/main/src/util/strings.js"
        return httpx.Response(200, content=b"export {}")

    destination = tmp_path / "out" / "src" / "util" / "strings.js"
    written = await make_service(handler).fetch_to_file(
        "https://raw.githubusercontent.com/acme/widgets/main/src/util/strings.js",
        destination
    )

    assert written == 9
    assert destination.read_bytes() == b"export {}"


async def test_fetch_to_file_missing_writes_nothing(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="404: Not Found")

    destination = tmp_path / "missing.txt"
    with pytest.raises(NotFoundError):
        await make_service(handler).fetch_to_file(
            "https://raw.githubusercontent.com/acme/widgets/main/missing.txt",
            destination
        )
    assert not destination.exists()


async def test_server_error_is_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    with pytest.raises(ApiError) as excinfo:
        await make_service(handler).fetch_content("https://raw.githubusercontent.com/a/b/main/c")
    assert excinfo.value.status_code == 500


async def test_ensure_directory(tmp_path):
    target = tmp_path / "a" / "b"
    await make_service(lambda request: httpx.Response(200)).ensure_directory(target)
    assert target.is_dir()
