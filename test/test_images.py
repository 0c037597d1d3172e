"""
Tests for blogql/storage/images.py.
"""

from blogql.storage.images import ALLOWED_IMAGE_TYPES, ImageStore


class TestImageStore:
    """Test directory-backed image storage."""

    def test_save(self, tmp_path):
        """Images are stored under a unique name and a relative path returned."""
        store = ImageStore(tmp_path / "images")

        path = store.save("cat photo.png", b"\x89PNG")

        assert path.startswith("images/")
        assert path.endswith("-cat-photo.png")
        stored = tmp_path / "images" / path.split("/", 1)[1]
        assert stored.read_bytes() == b"\x89PNG"

    def test_save_unique_names(self, tmp_path):
        """Saving the same filename twice keeps both files."""
        store = ImageStore(tmp_path)
        assert store.save("a.png", b"1") != store.save("a.png", b"2")
        assert len(list(tmp_path.iterdir())) == 2

    def test_save_strips_directories(self, tmp_path):
        """Client-supplied directories are discarded."""
        store = ImageStore(tmp_path / "images")
        path = store.save("../../etc/passwd.png", b"x")
        assert "/etc/" not in path
        assert (tmp_path / "images" / path.split("/", 1)[1]).exists()

    def test_clear_image(self, tmp_path):
        """A stored image can be removed by its path."""
        store = ImageStore(tmp_path)
        path = store.save("a.png", b"1")

        assert store.clear_image(path) is True
        assert list(tmp_path.iterdir()) == []

    def test_clear_missing_image(self, tmp_path):
        """Removing a missing file is not an error."""
        store = ImageStore(tmp_path)
        assert store.clear_image("images/missing.png") is False
        assert store.clear_image("") is False
        assert store.clear_image(None) is False

    def test_clear_stays_inside_directory(self, tmp_path):
        """Paths pointing elsewhere only ever resolve inside the store."""
        outside = tmp_path / "keep.png"
        outside.write_bytes(b"keep")
        store = ImageStore(tmp_path / "images")

        assert store.clear_image("../keep.png") is False
        assert outside.exists()
        assert store.clear_image("images/..") is False

    def test_allowed_types(self):
        """PNG and JPEG uploads are accepted."""
        assert set(ALLOWED_IMAGE_TYPES) == {"image/png", "image/jpg", "image/jpeg"}
