"""Tests for attachment download and persistence."""

import json

import httpx
import pytest

from botin.core.fetcher import AttachmentFetcher, rehydrate_buffers
from botin.models import AttachmentRef, FetchedFile

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\xff\x00\x10"


def make_fetcher(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AttachmentFetcher(client=client)


class TestRehydrateBuffers:
    def test_top_level_buffer_marker(self):
        doc = json.dumps({"type": "Buffer", "data": list(PNG_BYTES)}).encode()
        assert rehydrate_buffers(doc) == PNG_BYTES

    def test_plain_document_unchanged(self):
        doc = b'{"name": "settings", "values": [1, 2, 3]}'
        assert rehydrate_buffers(doc) == doc

    def test_nested_marker_decoded(self):
        doc = json.dumps({"file": {"type": "Buffer", "data": list(PNG_BYTES)}}).encode()
        assert rehydrate_buffers(doc) == PNG_BYTES

    def test_several_markers_joined_in_document_order(self):
        doc = json.dumps({
            "parts": [
                {"type": "Buffer", "data": [1, 2]},
                {"meta": {"type": "Buffer", "data": [3]}},
            ],
            "tail": {"type": "Buffer", "data": [4, 5]},
        }).encode()
        assert rehydrate_buffers(doc) == b"\x01\x02\x03\x04\x05"

    def test_out_of_range_byte_raises(self):
        with pytest.raises(ValueError):
            rehydrate_buffers(b'{"type": "Buffer", "data": [256]}')

    def test_malformed_json_raises(self):
        with pytest.raises(ValueError):
            rehydrate_buffers(b"{not json")


class TestAttachmentFetcher:
    async def test_binary_written_as_is(self, tmp_path):
        def handler(request):
            return httpx.Response(200, content=PNG_BYTES, headers={"content-type": "image/png"})

        fetcher = make_fetcher(handler)
        ref = AttachmentRef(name="pic.png", content_url="https://files.test/pic.png")

        outcome = await fetcher.fetch(ref, tmp_path)

        assert outcome == FetchedFile(file_name="pic.png", local_path=str(tmp_path / "pic.png"))
        assert (tmp_path / "pic.png").read_bytes() == PNG_BYTES

    async def test_json_buffer_restores_original_bytes(self, tmp_path):
        body = json.dumps({"type": "Buffer", "data": list(PNG_BYTES)}).encode()

        def handler(request):
            return httpx.Response(
                200, content=body, headers={"content-type": "application/json; charset=utf-8"}
            )

        fetcher = make_fetcher(handler)
        ref = AttachmentRef(name="restored.bin", content_url="https://files.test/x")

        outcome = await fetcher.fetch(ref, tmp_path)

        assert outcome is not None
        assert (tmp_path / "restored.bin").read_bytes() == PNG_BYTES

    async def test_nested_json_buffer_written_as_bytes(self, tmp_path):
        body = json.dumps({"file": {"type": "Buffer", "data": list(PNG_BYTES)}}).encode()

        def handler(request):
            return httpx.Response(200, content=body, headers={"content-type": "application/json"})

        fetcher = make_fetcher(handler)
        ref = AttachmentRef(name="nested.png", content_url="https://files.test/nested")

        outcome = await fetcher.fetch(ref, tmp_path)

        assert outcome is not None
        assert (tmp_path / "nested.png").read_bytes() == PNG_BYTES

    async def test_json_like_text_with_other_type_not_decoded(self, tmp_path):
        body = json.dumps({"type": "Buffer", "data": [65, 66]}).encode()

        def handler(request):
            return httpx.Response(200, content=body, headers={"content-type": "text/plain"})

        fetcher = make_fetcher(handler)
        ref = AttachmentRef(name="note.txt", content_url="https://files.test/note")

        await fetcher.fetch(ref, tmp_path)
        assert (tmp_path / "note.txt").read_bytes() == body

    async def test_invalid_json_is_failure(self, tmp_path):
        def handler(request):
            return httpx.Response(200, content=b"{oops", headers={"content-type": "application/json"})

        fetcher = make_fetcher(handler)
        ref = AttachmentRef(name="bad.json", content_url="https://files.test/bad")

        assert await fetcher.fetch(ref, tmp_path) is None
        assert not (tmp_path / "bad.json").exists()

    async def test_http_error_is_failure(self, tmp_path):
        def handler(request):
            return httpx.Response(404)

        fetcher = make_fetcher(handler)
        ref = AttachmentRef(name="gone.png", content_url="https://files.test/gone")

        assert await fetcher.fetch(ref, tmp_path) is None

    async def test_network_error_is_failure(self, tmp_path):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        fetcher = make_fetcher(handler)
        ref = AttachmentRef(name="x.png", content_url="https://files.test/x")

        assert await fetcher.fetch(ref, tmp_path) is None

    async def test_write_error_is_failure(self, tmp_path):
        def handler(request):
            return httpx.Response(200, content=b"data")

        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory")
        fetcher = make_fetcher(handler)
        ref = AttachmentRef(name="out.bin", content_url="https://files.test/out")

        assert await fetcher.fetch(ref, blocker) is None

    async def test_same_name_overwrites(self, tmp_path):
        bodies = iter([b"first", b"second"])

        def handler(request):
            return httpx.Response(200, content=next(bodies))

        fetcher = make_fetcher(handler)
        ref = AttachmentRef(name="dup.txt", content_url="https://files.test/dup")

        await fetcher.fetch(ref, tmp_path)
        await fetcher.fetch(ref, tmp_path)
        assert (tmp_path / "dup.txt").read_bytes() == b"second"

    async def test_close_leaves_injected_client_open(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        fetcher = AttachmentFetcher(client=client)
        await fetcher.close()
        assert not client.is_closed
        await client.aclose()
