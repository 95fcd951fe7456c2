import asyncio
import base64
import json

import pytest

from resume_assets.core import errcodes
from resume_assets.modules.assets.exceptions import ObjectStoreError
from resume_assets.modules.printing import BucketMissingError, PrintAssembler, PrintAssemblyError
from resume_assets.modules.printing.assembler import MISSING_IMAGES_MESSAGE, decode_content
from support import PNG_BYTES, FakeObjectStore

OWNER = 42


def image(item_id, content):
    return {"id": item_id, "type": "image", "content": content, "x": 10, "y": 20}


def document(*items, layout=None):
    return json.dumps({"layout_settings": layout or {"pageSize": "A4"}, "items": list(items)})


def data_uri(content_type, data):
    return f"data:{content_type};base64,{base64.b64encode(data).decode('ascii')}"


@pytest.fixture()
def assembler(object_store):
    return PrintAssembler(object_store)


@pytest.mark.anyio
async def test_images_are_inlined_as_data_uris(assembler, object_store):
    object_store.put("user-assets/42/a.png", PNG_BYTES, "image/png")
    object_store.put("user-assets/42/b.jpg", b"jpeg-bytes", "image/jpeg")

    result = await assembler.assemble(
        document(image("1", "user-assets/42/a.png"), image("2", " user-assets/42/b.jpg ")),
        OWNER,
    )

    items = result.data.items
    assert [item["content"] for item in items] == [
        data_uri("image/png", PNG_BYTES),
        data_uri("image/jpeg", b"jpeg-bytes"),
    ]
    assert items[0]["x"] == 10
    assert result.data.layout_settings == {"pageSize": "A4"}
    assert result.data.warnings == []
    assert result.removed == []


@pytest.mark.anyio
async def test_missing_image_is_dropped_with_one_warning(assembler, object_store):
    object_store.put("user-assets/42/a.png", PNG_BYTES)
    object_store.put("user-assets/42/c.png", PNG_BYTES)

    result = await assembler.assemble(
        document(
            image("1", "user-assets/42/a.png"),
            image("2", "user-assets/42/missing.png"),
            image("3", "user-assets/42/c.png"),
        ),
        OWNER,
    )

    assert [item["id"] for item in result.data.items] == ["1", "3"]
    assert len(result.data.warnings) == 1
    warning = result.data.warnings[0]
    assert warning.code == errcodes.RESOURCE_MISSING == 4004
    assert warning.message == MISSING_IMAGES_MESSAGE
    assert warning.missing_keys == ["user-assets/42/missing.png"]
    assert [(entry.item_id, entry.reason) for entry in result.removed] == [("2", "object not found")]


@pytest.mark.anyio
async def test_repeated_missing_key_is_listed_once(assembler):
    result = await assembler.assemble(
        document(image("1", "user-assets/42/gone.png"), image("2", "user-assets/42/gone.png")),
        OWNER,
    )

    assert result.data.items == []
    assert result.data.warnings[0].missing_keys == ["user-assets/42/gone.png"]
    assert len(result.removed) == 2


@pytest.mark.anyio
async def test_foreign_and_malformed_keys_are_never_fetched(assembler, object_store):
    object_store.put("user-assets/7/theirs.png", PNG_BYTES)

    result = await assembler.assemble(
        document(
            image("1", "user-assets/7/theirs.png"),
            image("2", "user-assets/42/../7/theirs.png"),
            image("3", "https://example.com/remote.png"),
        ),
        OWNER,
    )

    assert result.data.items == []
    assert object_store.fetched == []
    assert result.data.warnings[0].missing_keys == [
        "user-assets/7/theirs.png",
        "user-assets/42/../7/theirs.png",
        "https://example.com/remote.png",
    ]
    assert {entry.reason for entry in result.removed} == {"invalid object key format"}


@pytest.mark.anyio
async def test_empty_and_non_string_image_content(assembler):
    result = await assembler.assemble(
        document(
            {"id": "1", "type": "image"},
            image("2", "   "),
            image("3", {"key": "user-assets/42/a.png"}),
        ),
        OWNER,
    )

    assert result.data.items == []
    assert [entry.reason for entry in result.removed] == [
        "empty content",
        "empty content",
        "invalid content type",
    ]
    warning = result.data.warnings[0]
    assert warning.code == errcodes.RESOURCE_MISSING
    assert warning.missing_keys == []


@pytest.mark.anyio
async def test_non_image_content_is_normalized_to_strings(assembler):
    result = await assembler.assemble(
        document(
            {"id": "t", "type": "text", "content": "Hello"},
            {"id": "n", "type": "text"},
            {"id": "d", "type": "table", "content": {"rows": [1, 2]}},
            {"id": "l", "type": "list", "content": ["a", "b"]},
            {"id": "b", "type": "flag", "content": True},
            {"id": "i", "type": "number", "content": 12},
        ),
        OWNER,
    )

    contents = {item["id"]: item["content"] for item in result.data.items}
    assert contents == {
        "t": "Hello",
        "n": "",
        "d": '{"rows": [1, 2]}',
        "l": '["a", "b"]',
        "b": "true",
        "i": "12",
    }
    assert result.data.warnings == []


@pytest.mark.anyio
async def test_missing_stored_content_type_defaults_to_png(assembler, object_store):
    object_store.put("user-assets/42/a.png", PNG_BYTES, None)

    result = await assembler.assemble(document(image("1", "user-assets/42/a.png")), OWNER)

    assert result.data.items[0]["content"].startswith("data:image/png;base64,")


@pytest.mark.anyio
async def test_missing_bucket_aborts_assembly(assembler, object_store):
    object_store.bucket_missing = True

    with pytest.raises(BucketMissingError):
        await assembler.assemble(document(image("1", "user-assets/42/a.png")), OWNER)


@pytest.mark.anyio
async def test_other_storage_failure_aborts_assembly(assembler, object_store):
    object_store.put("user-assets/42/a.png", PNG_BYTES)
    object_store.get_errors["user-assets/42/b.png"] = ObjectStoreError("connection reset")

    with pytest.raises(PrintAssemblyError) as exc_info:
        await assembler.assemble(
            document(image("1", "user-assets/42/a.png"), image("2", "user-assets/42/b.png")),
            OWNER,
        )

    assert not isinstance(exc_info.value, BucketMissingError)


@pytest.mark.anyio
async def test_camel_case_layout_key_is_accepted(assembler):
    result = await assembler.assemble(
        json.dumps({"layoutSettings": {"margin": 8}, "items": []}),
        OWNER,
    )

    assert result.data.layout_settings == {"margin": 8}
    assert result.data.to_dict() == {"layout_settings": {"margin": 8}, "items": [], "warnings": []}


@pytest.mark.parametrize("raw", ["{not json", "[1, 2]", json.dumps({"items": "nope"}), json.dumps({"items": [1]})])
def test_malformed_documents_are_rejected(raw):
    with pytest.raises(PrintAssemblyError):
        decode_content(raw)


def test_empty_document_decodes_to_nothing():
    assert decode_content("") == ({}, [])


class BlockingObjectStore(FakeObjectStore):
    """Answers fetches until ``blocked_key``, which hangs until cancelled."""

    def __init__(self, blocked_key):
        super().__init__()
        self.blocked_key = blocked_key
        self.waiting = asyncio.Event()

    async def get(self, key):
        if key == self.blocked_key:
            self.fetched.append(key)
            self.waiting.set()
            await asyncio.Event().wait()
        return await super().get(key)


@pytest.mark.anyio
async def test_cancelled_fetch_propagates_without_result():
    store = BlockingObjectStore("user-assets/42/b.png")
    store.put("user-assets/42/a.png", PNG_BYTES)
    store.put("user-assets/42/c.png", PNG_BYTES)
    assembler = PrintAssembler(store)

    task = asyncio.create_task(
        assembler.assemble(
            document(
                image("1", "user-assets/42/a.png"),
                image("2", "user-assets/42/b.png"),
                image("3", "user-assets/42/c.png"),
            ),
            OWNER,
        )
    )
    await store.waiting.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert store.fetched == ["user-assets/42/a.png", "user-assets/42/b.png"]


@pytest.mark.anyio
async def test_cancellation_raised_by_store_is_not_a_warning(object_store):
    object_store.put("user-assets/42/a.png", PNG_BYTES)
    object_store.get_errors["user-assets/42/a.png"] = asyncio.CancelledError()
    assembler = PrintAssembler(object_store)

    with pytest.raises(asyncio.CancelledError):
        await assembler.assemble(document(image("1", "user-assets/42/a.png")), OWNER)
