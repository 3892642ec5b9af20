"""Tests for URL resolution."""

import pytest

from neo_uploads import Artifact, UrlResolver

from conftest import ImageDefinition, SkipThumbDefinition


class PlaceholderDefinition(ImageDefinition):
    def default_url(self, version, scope):
        return f"https://cdn.example.com/placeholders/{version}.png"


class TestUrlResolver:
    """Test URL resolution for stored files."""

    @pytest.fixture
    def resolver(self, image_definition):
        return UrlResolver(image_definition)

    def test_defaults_to_first_version(self, resolver):
        assert resolver.url("image.png") == "memory://uploads/original_image.png"

    def test_named_version(self, resolver):
        assert resolver.url("image.png", "thumb") == "memory://uploads/thumb_image.png"

    def test_file_scope_tuple(self, settings, backend):
        class ScopedDefinition(ImageDefinition):
            def storage_dir(self, version, artifact, scope):
                return f"uploads/{scope['id']}"

        resolver = UrlResolver(ScopedDefinition(settings=settings, storage=backend))
        assert resolver.url(("image.png", {"id": 1}), "thumb") == "memory://uploads/1/thumb_image.png"

    def test_accepts_objects_with_file_name(self, resolver):
        artifact = Artifact(file_name="image.png", path="/tmp/x.png")
        assert resolver.url(artifact) == "memory://uploads/original_image.png"

    def test_missing_file_uses_default_url(self, settings, backend):
        resolver = UrlResolver(PlaceholderDefinition(settings=settings, storage=backend))
        assert resolver.url(None, "thumb") == "https://cdn.example.com/placeholders/thumb.png"
        assert resolver.url((None, {"id": 1})) == "https://cdn.example.com/placeholders/original.png"

    def test_missing_file_without_default(self, resolver):
        assert resolver.url(None) is None

    def test_skipped_version(self, settings, backend):
        resolver = UrlResolver(SkipThumbDefinition(settings=settings, storage=backend))
        assert resolver.url("image.png", "thumb") is None

    def test_expire_in_alias(self, resolver):
        assert resolver.url("image.png", signed=True, expire_in=60) == (
            "memory://uploads/original_image.png?expires_in=60"
        )

    def test_urls_for_every_version(self, settings, backend):
        resolver = UrlResolver(SkipThumbDefinition(settings=settings, storage=backend))
        assert resolver.urls("image.png") == {
            "original": "memory://uploads/original_image.png",
            "thumb": None,
        }
