"""Unit tests for the descriptor repository and image records."""
from __future__ import annotations

import json

import pytest

from photoblog_admin.models.schemas import AlbumImage
from photoblog_admin.repositories import DescriptorRepository


class TestAlbumImage:
    """Test AlbumImage normalization."""

    def test_legacy_entry_normalizes(self):
        image = AlbumImage.model_validate({
            "imageFull-link": "https://cdn.example.com/a/img000.jpg",
            "thumbnail-link": "https://cdn.example.com/a/thumb/img000.webp",
            "aspect-ratio": "1.7778",
        })

        assert image == AlbumImage(
            url="https://cdn.example.com/a/img000.jpg",
            thumb="https://cdn.example.com/a/thumb/img000.webp",
            aspect_ratio=1.7778,
            width=0,
            height=0,
        )

    def test_missing_aspect_ratio_defaults(self):
        assert AlbumImage.model_validate({"url": "u", "thumb": "t"}).aspect_ratio == 1.5
        assert AlbumImage.model_validate({"url": "u", "aspectRatio": 0}).aspect_ratio == 1.5

    def test_null_dimensions_become_zero(self):
        image = AlbumImage.model_validate({"url": "u", "width": None, "height": None})

        assert (image.width, image.height) == (0, 0)

    def test_serializes_camel_case(self):
        data = AlbumImage(url="u", thumb="t", aspect_ratio=1.25, width=5, height=4).model_dump(by_alias=True)

        assert data == {"url": "u", "thumb": "t", "aspectRatio": 1.25, "width": 5, "height": 4}


class TestDescriptorRepository:
    """Test DescriptorRepository."""

    def test_list_slugs_skips_underscored_files(self, tmp_path):
        repo = DescriptorRepository(tmp_path)
        for name in ["b.json", "a.json", "_album-order.json", "notes.txt"]:
            (tmp_path / name).write_text("[]")

        assert repo.list_slugs() == ["a", "b"]

    def test_write_uses_current_format(self, tmp_path):
        repo = DescriptorRepository(tmp_path)
        repo.write("album", [AlbumImage(url="u", thumb="t", aspect_ratio=1.5, width=3, height=2)])

        assert json.loads((tmp_path / "album.json").read_text()) == [
            {"url": "u", "thumb": "t", "aspectRatio": 1.5, "width": 3, "height": 2}
        ]

    def test_read_mixed_formats(self, tmp_path):
        repo = DescriptorRepository(tmp_path)
        (tmp_path / "album.json").write_text(json.dumps([
            {"url": "u0", "thumb": "t0", "aspectRatio": 1.25, "width": 10, "height": 8},
            {"imageFull-link": "u1", "thumbnail-link": "t1", "aspect-ratio": 0.75},
        ]))

        images = repo.read("album")

        assert [img.url for img in images] == ["u0", "u1"]
        assert images[1].aspect_ratio == 0.75

    @pytest.mark.parametrize("content", ["{not json", '{"url": "u"}', "[null]"])
    def test_read_corrupt_descriptor_raises(self, tmp_path, content):
        repo = DescriptorRepository(tmp_path)
        (tmp_path / "album.json").write_text(content)

        with pytest.raises(ValueError):
            repo.read("album")

    def test_delete(self, tmp_path):
        repo = DescriptorRepository(tmp_path)
        repo.write("album", [])

        assert repo.delete("album") is True
        assert repo.delete("album") is False
        assert not repo.exists("album")
