"""
Integration tests for chained nodes: a forwarding node relays over HTTP to a
standalone node, both running in-process through httpx.ASGITransport.
"""
import asyncio

import httpx
import pytest

from common.communication import HttpClient
from kvs.api import create_api
from kvs.relay import HttpRelay
from kvs.router import RequestRouter
from kvs.store import KeyValueStore


def standalone_node(node_id: str = "node-a"):
    store = KeyValueStore()
    app = create_api(RequestRouter(store, node_id=node_id), node_id=node_id)
    return app, store


def forwarding_node(upstream_app, upstream_address: str = "node-a:8090", node_id: str = "node-b"):
    store = KeyValueStore()
    http_client = HttpClient(timeout=5.0, transport=httpx.ASGITransport(app=upstream_app))
    relay = HttpRelay(upstream_address, http_client)
    app = create_api(RequestRouter(store, relay, node_id=node_id), node_id=node_id,
                     forwarding_address=upstream_address)
    return app, store, relay


def client_for(app, host: str) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url=f"http://{host}")


@pytest.mark.asyncio
async def test_example_scenario_through_forwarder():
    """The forwarder behaves exactly like the node it relays to."""
    upstream_app, upstream_store = standalone_node()
    forwarder_app, forwarder_store, relay = forwarding_node(upstream_app)

    async with client_for(forwarder_app, "node-b") as client:
        response = await client.put("/kvs/foo", json={"value": 42})
        assert (response.status_code, response.json()) == (201, {"result": "created"})

        response = await client.get("/kvs/foo")
        assert (response.status_code, response.json()) == (200, {"result": "found", "value": 42})

        response = await client.put("/kvs/foo", json={"value": "bar"})
        assert (response.status_code, response.json()) == (200, {"result": "replaced"})

        response = await client.delete("/kvs/foo")
        assert (response.status_code, response.json()) == (200, {"result": "deleted"})

        response = await client.get("/kvs/foo")
        assert (response.status_code, response.json()) == (404, {"error": "Key does not exist"})

    await relay.close()
    assert forwarder_store.size() == 0
    assert upstream_store.size() == 0


@pytest.mark.asyncio
async def test_forwarded_responses_are_byte_identical():
    upstream_app, _ = standalone_node()
    forwarder_app, _, relay = forwarding_node(upstream_app)
    value = {"ünïcode": "✓", "numbers": [1, 2.5, -3], "nested": {"null": None, "ok": True}}

    async with client_for(upstream_app, "node-a") as direct, client_for(forwarder_app, "node-b") as forwarded:
        await direct.put("/kvs/doc", json={"value": value})

        for path in ("/kvs/doc", "/kvs/missing"):
            direct_response = await direct.get(path)
            forwarded_response = await forwarded.get(path)

            assert forwarded_response.status_code == direct_response.status_code
            assert forwarded_response.content == direct_response.content

    await relay.close()


@pytest.mark.asyncio
async def test_upstream_validation_errors_pass_through():
    """Key length is judged by the upstream and its 400 is returned as-is."""
    upstream_app, upstream_store = standalone_node()
    forwarder_app, _, relay = forwarding_node(upstream_app)

    async with client_for(forwarder_app, "node-b") as client:
        response = await client.put("/kvs/" + "k" * 51, json={"value": 1})

    await relay.close()
    assert (response.status_code, response.json()) == (400, {"error": "Key is too long"})
    assert upstream_store.size() == 0


@pytest.mark.asyncio
async def test_missing_body_is_rejected_by_forwarder():
    upstream_app, _ = standalone_node()
    forwarder_app, _, relay = forwarding_node(upstream_app)

    async with client_for(forwarder_app, "node-b") as client:
        response = await client.put("/kvs/foo")

    await relay.close()
    assert (response.status_code, response.json()) == (400, {"error": "PUT request does not specify a value"})


@pytest.mark.asyncio
async def test_chain_of_three_nodes():
    node_a, store_a = standalone_node("node-a")
    node_b, _, relay_b = forwarding_node(node_a, "node-a:8090", "node-b")
    node_c, _, relay_c = forwarding_node(node_b, "node-b:8090", "node-c")

    async with client_for(node_c, "node-c") as client:
        response = await client.put("/kvs/chained", json={"value": [1, 2, 3]})
        assert response.status_code == 201

        response = await client.get("/kvs/chained")
        assert response.json() == {"result": "found", "value": [1, 2, 3]}

    await relay_c.close()
    await relay_b.close()
    assert store_a.size() == 1


@pytest.mark.asyncio
async def test_concurrent_forwarded_puts_to_distinct_keys():
    upstream_app, upstream_store = standalone_node()
    forwarder_app, _, relay = forwarding_node(upstream_app)
    keys = [f"key-{i}" for i in range(30)]

    async with client_for(forwarder_app, "node-b") as client:
        responses = await asyncio.gather(*(client.put(f"/kvs/{k}", json={"value": k}) for k in keys))

    await relay.close()
    assert all(r.status_code == 201 for r in responses)
    assert upstream_store.size() == len(keys)


@pytest.mark.asyncio
async def test_unreachable_upstream_returns_503():
    """Connection refused on a closed local port becomes a 503."""
    store = KeyValueStore()
    relay = HttpRelay("127.0.0.1:1", HttpClient(timeout=2.0))
    app = create_api(RequestRouter(store, relay, node_id="node-b"), node_id="node-b")

    async with client_for(app, "node-b") as client:
        responses = [
            await client.put("/kvs/foo", json={"value": 1}),
            await client.get("/kvs/foo"),
            await client.delete("/kvs/foo"),
        ]

    await relay.close()
    for response in responses:
        assert response.status_code == 503
        assert response.json() == {"error": "Cannot forward request"}
    assert store.size() == 0


@pytest.mark.asyncio
async def test_non_json_upstream_returns_500():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"plain text", headers={"Content-Type": "text/plain"})

    relay = HttpRelay("node-a:8090", HttpClient(transport=httpx.MockTransport(handler)))
    app = create_api(RequestRouter(KeyValueStore(), relay), node_id="node-b")

    async with client_for(app, "node-b") as client:
        response = await client.get("/kvs/foo")

    await relay.close()
    assert response.status_code == 500
    assert response.json()["error"].startswith("Failed to parse JSON response: ")
