"""Unit tests for storage module."""

import os
from pathlib import Path
from unittest.mock import Mock

import pytest

from image_server.errors import InvalidPathError, StorageError
from image_server.storage import LocalVariantStore, VariantStore


class TestVariantStore:
    """Test VariantStore interface."""

    def test_interface_methods_defined(self):
        """Test that interface has required methods."""
        for name in ("derived_path", "exists", "read", "persist"):
            assert hasattr(VariantStore, name)

    def test_runtime_checkable(self):
        """Test that VariantStore can be used with isinstance at runtime."""
        mock_store = Mock(spec=VariantStore)
        assert isinstance(mock_store, VariantStore)

    def test_non_compliant_class(self):
        """Test that non-compliant classes don't match the protocol."""
        class BadStore:
            def exists(self, path: Path) -> bool:
                return False
            # Missing derived_path, read and persist

        assert not isinstance(BadStore(), VariantStore)


class TestDerivedPath:
    """Test artifact naming."""

    @pytest.fixture
    def store(self):
        return LocalVariantStore()

    def test_named_variant(self, store):
        path = store.derived_path(Path("/data/avatars/u1"), "preview", "png")
        assert path == Path("/data/avatars/u1.preview.png")

    def test_source_extension_is_kept(self, store):
        path = store.derived_path(Path("/data/avatars/u1.webp"), "preview", "jpg")
        assert path == Path("/data/avatars/u1.webp.preview.jpg")

    def test_sources_sharing_a_base_name(self, store):
        """u1.png and u1.webp converted to the same format stay apart."""
        names = ("u1", "u1.png", "u1.jpg", "u1.webp", "u1.jpeg")
        paths = {store.derived_path(Path("/data") / name, "", "jpg") for name in names}
        assert len(paths) == len(names)

    def test_unknown_suffix_is_kept(self, store):
        path = store.derived_path(Path("/data/photo.2024"), "preview", "jpg")
        assert path == Path("/data/photo.2024.preview.jpg")

    def test_format_is_lowercased(self, store):
        path = store.derived_path(Path("/data/u1"), "preview", "JPG")
        assert path == Path("/data/u1.preview.jpg")

    def test_empty_variant(self, store):
        """A plain conversion gets an empty variant segment."""
        path = store.derived_path(Path("/data/u1.jpg"), "", "png")
        assert path == Path("/data/u1.jpg..png")

    def test_never_collides_with_source_candidates(self, store):
        source = Path("/data/u1.jpg")
        candidates = {Path("/data/u1" + ext) for ext in ("", ".png", ".jpg", ".webp", ".jpeg")}
        for variant in ("", "preview", "thumb"):
            for fmt in ("png", "jpg", "jpeg"):
                assert store.derived_path(source, variant, fmt) not in candidates

    def test_distinct_triples_distinct_paths(self, store):
        source = Path("/data/u1")
        paths = {
            store.derived_path(source, variant, fmt)
            for variant in ("", "preview", "thumb", "preview2")
            for fmt in ("png", "jpg", "jpeg")
        }
        assert len(paths) == 12

    def test_deterministic(self, store):
        a = store.derived_path(Path("/data/u1"), "preview", "png")
        b = LocalVariantStore().derived_path(Path("/data/u1"), "preview", "png")
        assert a == b

    @pytest.mark.parametrize("variant", ["../x", "a/b", "a.b"])
    def test_unsafe_variant(self, store, variant):
        with pytest.raises(InvalidPathError):
            store.derived_path(Path("/data/u1"), variant, "png")

    def test_unsafe_format(self, store):
        with pytest.raises(InvalidPathError):
            store.derived_path(Path("/data/u1"), "preview", "png/../../x")

    def test_root_has_no_artifact(self, store):
        with pytest.raises(InvalidPathError):
            store.derived_path(Path("/"), "preview", "png")


class TestLocalVariantStore:
    """Test LocalVariantStore filesystem operations."""

    @pytest.fixture
    def store(self):
        return LocalVariantStore()

    def test_implements_variant_store_protocol(self, store):
        assert isinstance(store, VariantStore)

    def test_exists(self, store, tmp_path):
        artifact = tmp_path / "u1.preview.png"
        assert not store.exists(artifact)

        artifact.write_bytes(b"png")
        assert store.exists(artifact)

    def test_directory_does_not_exist_as_artifact(self, store, tmp_path):
        (tmp_path / "u1.preview.png").mkdir()
        assert not store.exists(tmp_path / "u1.preview.png")

    def test_persist_creates_parents(self, store, tmp_path):
        artifact = tmp_path / "a" / "b" / "u1.preview.png"
        store.persist(artifact, b"content")

        assert artifact.read_bytes() == b"content"

    def test_persist_overwrites(self, store, tmp_path):
        artifact = tmp_path / "u1.preview.png"
        artifact.write_bytes(b"old")

        store.persist(artifact, b"new")
        assert artifact.read_bytes() == b"new"

    def test_persist_leaves_no_temporary_files(self, store, tmp_path):
        store.persist(tmp_path / "u1.preview.png", b"content")
        assert os.listdir(tmp_path) == ["u1.preview.png"]

    def test_persist_empty_content(self, store, tmp_path):
        with pytest.raises(ValueError, match="cannot be empty"):
            store.persist(tmp_path / "u1.preview.png", b"")

    def test_persist_storage_error(self, store, tmp_path, monkeypatch):
        """A failed rename surfaces as StorageError and cleans up."""
        def failing_replace(src, dst):
            raise OSError("Simulated rename failure")

        monkeypatch.setattr("image_server.storage.local.os.replace", failing_replace)

        with pytest.raises(StorageError, match="Failed to save image"):
            store.persist(tmp_path / "u1.preview.png", b"content")
        assert os.listdir(tmp_path) == []

    def test_persist_unwritable_parent(self, store, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_bytes(b"not a directory")

        with pytest.raises(StorageError):
            store.persist(blocker / "u1.preview.png", b"content")

    def test_read(self, store, tmp_path):
        source = tmp_path / "u1.png"
        source.write_bytes(b"\x89PNG data")
        assert store.read(source) == b"\x89PNG data"

    def test_read_not_found(self, store, tmp_path):
        with pytest.raises(FileNotFoundError, match="File not found"):
            store.read(tmp_path / "missing.png")

    def test_read_storage_error(self, store, tmp_path, monkeypatch):
        source = tmp_path / "u1.png"
        source.write_bytes(b"content")

        def mock_read_bytes(self):
            raise IOError("Simulated read failure")

        monkeypatch.setattr(Path, "read_bytes", mock_read_bytes)

        with pytest.raises(StorageError, match="Failed to read image"):
            store.read(source)
