import base64
import os

import pytest

from files_manager.access import resolve_read_path
from files_manager.adapters.queue import Lane
from files_manager.adapters.storage import THUMBNAIL_WIDTHS, variant_path
from files_manager.errors import InternalError, InvalidParent, NotFound, ValidationError
from files_manager.tasks.payloads import GENERATE_THUMBNAILS, UPLOAD_FILE

OWNER = "64b7f0c2a1e4d3b2c1a09f8e"
OTHER_USER = "64b7f0c2a1e4d3b2c1a09f8f"
TEXT_DATA = base64.b64encode(b"Hello Webstack!\n").decode("ascii")


def upload(core, owner=OWNER, **payload):
    return core.queue.submit(Lane.FILE, UPLOAD_FILE, {"owner_user_id": owner, **payload})


def thumbnails(core, file_id, owner=OWNER):
    return core.queue.submit(Lane.FILE, GENERATE_THUMBNAILS, {"owner_user_id": owner, "file_id": file_id})


async def test_upload_then_resolve_read_path_scenario(running_core, blob_root):
    file = await upload(running_core, name="doc.txt", type="file", parent_id=0, data=TEXT_DATA)

    assert set(file) == {"id", "userId", "name", "type", "isPublic", "parentId"}
    assert file["userId"] == OWNER
    assert file["parentId"] == 0
    assert file["isPublic"] is False

    document = await running_core.files.get_file(file["id"])
    path = resolve_read_path(document, OWNER)
    assert path.parent == blob_root
    assert path.read_bytes() == b"Hello Webstack!\n"

    with pytest.raises(NotFound):
        resolve_read_path(document, OTHER_USER)


async def test_folder_does_not_need_data(running_core, blob_root):
    folder = await upload(running_core, name="images", type="folder")

    assert folder["type"] == "folder"
    document = await running_core.files.get_file(folder["id"])
    assert "localPath" not in document
    assert not blob_root.exists()


@pytest.mark.parametrize("file_type", ["file", "image"])
async def test_non_folder_requires_data(running_core, file_type):
    with pytest.raises(ValidationError) as exc_info:
        await upload(running_core, name="x", type=file_type)
    assert exc_info.value.message == "Missing data"


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"type": "file", "data": TEXT_DATA}, "Missing name"),
        ({"name": "x", "data": TEXT_DATA}, "Invalid type"),
        ({"name": "x", "type": "video", "data": TEXT_DATA}, "Invalid type"),
    ],
)
async def test_upload_validation(running_core, payload, message):
    with pytest.raises(ValidationError) as exc_info:
        await upload(running_core, **payload)
    assert exc_info.value.message == message


async def test_parent_must_exist(running_core):
    with pytest.raises(InvalidParent):
        await upload(running_core, name="x.txt", type="file", parent_id="64b7f0c2a1e4d3b2c1a09fff", data=TEXT_DATA)


async def test_parent_must_be_a_folder(running_core):
    plain = await upload(running_core, name="a.txt", type="file", data=TEXT_DATA)

    with pytest.raises(InvalidParent):
        await upload(running_core, name="b.txt", type="file", parent_id=plain["id"], data=TEXT_DATA)


async def test_parent_lookup_is_scoped_to_owner(running_core):
    foreign_folder = await upload(running_core, owner=OTHER_USER, name="theirs", type="folder")

    with pytest.raises(InvalidParent):
        await upload(running_core, name="b.txt", type="file", parent_id=foreign_folder["id"], data=TEXT_DATA)


async def test_upload_into_folder(running_core):
    folder = await upload(running_core, name="docs", type="folder")

    file = await upload(running_core, name="b.txt", type="file", parent_id=folder["id"], data=TEXT_DATA)

    assert file["parentId"] == folder["id"]
    children = await running_core.files.list_children(OWNER, folder["id"])
    assert [child["id"] for child in children] == [file["id"]]


async def test_root_parent_spellings_are_equivalent(running_core):
    file = await upload(running_core, name="b.txt", type="file", parent_id="0", data=TEXT_DATA)

    assert file["parentId"] == 0


async def test_stored_path_keeps_extension(running_core):
    file = await upload(running_core, name="Photo.PNG", type="file", data=TEXT_DATA)

    document = await running_core.files.get_file(file["id"])
    assert document["localPath"].endswith(".png")


async def test_generate_thumbnails_writes_three_renditions(running_core, png_base64, blob_root):
    image = await upload(running_core, name="pic.png", type="image", data=png_base64)

    widths = await thumbnails(running_core, image["id"])

    assert widths == [500, 250, 100]
    document = await running_core.files.get_file(image["id"])
    produced = sorted(p.name for p in blob_root.iterdir() if p.name != os.path.basename(document["localPath"]))
    assert len(produced) == 3
    for width in THUMBNAIL_WIDTHS:
        assert variant_path(document["localPath"], width).is_file()
        assert resolve_read_path(document, OWNER, size=width).name.endswith(f"_{width}.png")


async def test_thumbnail_keeps_aspect_ratio(running_core, png_base64):
    from PIL import Image

    image = await upload(running_core, name="pic.png", type="image", data=png_base64)
    await thumbnails(running_core, image["id"])

    document = await running_core.files.get_file(image["id"])
    with Image.open(variant_path(document["localPath"], 250)) as rendition:
        assert rendition.size == (250, 125)


async def test_thumbnails_for_deleted_source_is_not_found(running_core, png_base64):
    image = await upload(running_core, name="pic.png", type="image", data=png_base64)
    document = await running_core.files.get_file(image["id"])
    os.remove(document["localPath"])

    with pytest.raises(NotFound):
        await thumbnails(running_core, image["id"])


async def test_thumbnails_for_another_users_file_is_not_found(running_core, png_base64):
    image = await upload(running_core, name="pic.png", type="image", data=png_base64)

    with pytest.raises(NotFound):
        await thumbnails(running_core, image["id"], owner=OTHER_USER)


async def test_thumbnails_of_non_image_content_fail(running_core):
    file = await upload(running_core, name="notes.png", type="image", data=TEXT_DATA)

    with pytest.raises(InternalError):
        await thumbnails(running_core, file["id"])


async def test_overlong_name_is_rejected_before_writing(running_core, blob_root):
    with pytest.raises(ValidationError) as exc_info:
        await upload(running_core, name="a" * 300 + ".txt", type="file", data=TEXT_DATA)

    assert exc_info.value.message == "Invalid name"
    assert not blob_root.exists() or list(blob_root.iterdir()) == []


async def test_failed_insert_removes_written_blob(running_core, blob_root):
    async def broken_insert(document):
        raise ConnectionError("store went away")

    running_core.files.insert_file = broken_insert

    with pytest.raises(InternalError):
        await upload(running_core, name="doc.txt", type="file", data=TEXT_DATA)

    assert list(blob_root.iterdir()) == []


@pytest.mark.parametrize("data", ["!!!!", "aGk", "===="])
async def test_data_must_be_strict_non_empty_base64(running_core, blob_root, data):
    with pytest.raises(ValidationError) as exc_info:
        await upload(running_core, name="doc.txt", type="file", data=data)

    assert exc_info.value.message == "Invalid data"
    assert not blob_root.exists()


async def test_one_failing_rendition_fails_the_task(running_core, png_base64):
    image = await upload(running_core, name="pic.png", type="image", data=png_base64)
    storage = running_core.storage
    write_thumbnail = storage.write_thumbnail

    def fail_for_250(source, width):
        if width == 250:
            raise OSError("disk full")
        return write_thumbnail(source, width)

    storage.write_thumbnail = fail_for_250

    with pytest.raises(InternalError):
        await thumbnails(running_core, image["id"])

    document = await running_core.files.get_file(image["id"])
    assert not variant_path(document["localPath"], 250).exists()
