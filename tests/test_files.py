import pytest

from app.core.config import settings
from app.core.exceptions import FileSizeLimitException
from app.modules.utils.files import delete_image, save_image_upload


class _StreamingUpload:
    """Minimal UploadFile stand-in that can fail part way through the body."""

    def __init__(self, chunks, *, fail_with=None, content_type="image/png"):
        self.filename = "cover.png"
        self.content_type = content_type
        self._chunks = list(chunks)
        self._fail_with = fail_with

    async def read(self, size=-1):
        if self._chunks:
            return self._chunks.pop(0)
        if self._fail_with is not None:
            raise self._fail_with
        return b""


@pytest.mark.asyncio
async def test_save_image_upload_writes_file(tmp_path):
    upload = _StreamingUpload([b"\x89PNG", b"rest-of-image"])

    public_path = await save_image_upload(upload, folder=tmp_path)

    stored = tmp_path / public_path.rsplit("/", 1)[-1]
    assert public_path.startswith("/uploads/image-")
    assert public_path.endswith(".png")
    assert stored.read_bytes() == b"\x89PNGrest-of-image"


@pytest.mark.asyncio
async def test_interrupted_upload_leaves_no_partial_file(tmp_path):
    upload = _StreamingUpload([b"\x89PNG"], fail_with=OSError("connection reset"))

    with pytest.raises(OSError):
        await save_image_upload(upload, folder=tmp_path)

    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_oversized_upload_leaves_no_partial_file(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "max_upload_bytes", 4)
    upload = _StreamingUpload([b"\x89PNG", b"more"])

    with pytest.raises(FileSizeLimitException):
        await save_image_upload(upload, folder=tmp_path)

    assert list(tmp_path.iterdir()) == []


def test_delete_image(tmp_path):
    stored = tmp_path / "image-abc.png"
    stored.write_bytes(b"data")

    delete_image("/uploads/image-abc.png", folder=tmp_path)
    delete_image(None, folder=tmp_path)

    assert not stored.exists()
