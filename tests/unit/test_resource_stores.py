import base64

import httpx
import pytest

from core import ConfigurationException, ConfigurationServiceException, ResourceNotFoundException
from events.infrastructure import ConfigurationServiceResourceStore, LocalFileSystemResourceStore


def _store(handler, url="configuration-service:8080"):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ConfigurationServiceResourceStore(url, http_client=client)


@pytest.mark.asyncio
async def test_fetches_and_decodes_resource():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        content = base64.b64encode(b"indicators: {}\n").decode()
        return httpx.Response(200, json={"resourceURI": "sli.yaml", "resourceContent": content})

    store = _store(handler)
    content = await store.get_service_resource("sockshop", "staging", "carts", "sumologic-service/sli.yaml")
    await store.close()

    assert content == "indicators: {}\n"
    url = seen["url"]
    assert url.scheme == "http"
    assert url.host == "configuration-service"
    assert url.port == 8080
    assert url.path.startswith("/v1/project/sockshop/stage/staging/service/carts/resource/")
    assert url.path.endswith("sumologic-service/sli.yaml")
    assert b"sumologic-service%2Fsli.yaml" in url.raw_path


@pytest.mark.asyncio
async def test_keeps_explicit_scheme():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        return httpx.Response(200, json={"resourceContent": ""})

    store = _store(handler, url="https://config.example.com/api/")
    await store.get_service_resource("p", "s", "svc", "sli.yaml")

    assert seen["url"].scheme == "https"
    assert seen["url"].path == "/api/v1/project/p/stage/s/service/svc/resource/sli.yaml"


@pytest.mark.asyncio
async def test_missing_resource():
    store = _store(lambda request: httpx.Response(404, json={"message": "not found"}))

    with pytest.raises(ResourceNotFoundException):
        await store.get_service_resource("p", "s", "svc", "sli.yaml")


@pytest.mark.asyncio
async def test_server_error():
    store = _store(lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(ConfigurationServiceException, match="HTTP 500"):
        await store.get_service_resource("p", "s", "svc", "sli.yaml")


@pytest.mark.asyncio
async def test_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    store = _store(handler)

    with pytest.raises(ConfigurationServiceException):
        await store.get_service_resource("p", "s", "svc", "sli.yaml")


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{}, {"resourceContent": "abc"}, ["not", "an", "object"]])
async def test_invalid_payload(payload):
    store = _store(lambda request: httpx.Response(200, json=payload))

    with pytest.raises(ConfigurationServiceException):
        await store.get_service_resource("p", "s", "svc", "sli.yaml")


@pytest.mark.asyncio
async def test_unset_url():
    store = ConfigurationServiceResourceStore("")

    with pytest.raises(ConfigurationServiceException):
        await store.get_service_resource("p", "s", "svc", "sli.yaml")


@pytest.mark.asyncio
async def test_local_store_reads_resource(tmp_path):
    (tmp_path / "sumologic-service").mkdir()
    (tmp_path / "sumologic-service" / "sli.yaml").write_text("indicators: {}\n", encoding="utf-8")
    store = LocalFileSystemResourceStore(tmp_path)

    content = await store.get_service_resource("p", "s", "svc", "sumologic-service/sli.yaml")

    assert content == "indicators: {}\n"


@pytest.mark.asyncio
async def test_local_store_missing_resource(tmp_path):
    store = LocalFileSystemResourceStore(tmp_path)

    with pytest.raises(ResourceNotFoundException):
        await store.get_service_resource("p", "s", "svc", "sumologic-service/sli.yaml")


@pytest.mark.asyncio
async def test_local_store_undecodable_resource(tmp_path):
    (tmp_path / "sli.yaml").write_bytes(b"indicators:\n  throughput: \xff\xfe\n")
    store = LocalFileSystemResourceStore(tmp_path)

    with pytest.raises(ConfigurationException, match="could not read resource"):
        await store.get_service_resource("p", "s", "svc", "sli.yaml")
