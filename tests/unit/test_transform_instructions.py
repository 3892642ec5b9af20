"""Tests for transform instructions and version naming."""

import pytest

from neo_uploads import (
    NO_ACTION,
    SKIP,
    Artifact,
    Command,
    CustomFunction,
    Definition,
    NoAction,
    Skip,
    StoredFile,
    convert,
    ffmpeg,
)
from neo_uploads.application.services.version_naming import resolve_file_name, storage_key
from neo_uploads.core.value_objects.transform import coerce_instruction


class TestCommand:
    """Test command argument building."""

    def test_string_args_go_between_input_and_output(self):
        command = convert("-strip -thumbnail 10x10", "png")
        assert command.program == "convert"
        assert command.build_args("in.jpg", "out.png") == [
            "in.jpg", "-strip", "-thumbnail", "10x10", "out.png"
        ]

    def test_list_args_go_between_input_and_output(self):
        command = Command("convert", ["-resize", "50%"])
        assert command.build_args("a", "b") == ["a", "-resize", "50%", "b"]

    def test_function_args_build_the_full_list(self):
        command = ffmpeg(lambda i, o: f"-i {i} -f gif {o}", "gif")
        assert command.build_args("in.mp4", "out.gif") == ["-i", "in.mp4", "-f", "gif", "out.gif"]

    def test_output_extension_is_normalized(self):
        assert Command("convert", "", ".png").output_extension == "png"
        assert Command("convert", "").output_extension is None

    def test_empty_program_is_rejected(self):
        with pytest.raises(ValueError):
            Command("")


class TestCoerceInstruction:
    """Test shorthand instruction forms."""

    def test_shorthands(self):
        assert coerce_instruction(None) is NO_ACTION
        assert coerce_instruction("noaction") is NO_ACTION
        assert coerce_instruction("skip") is SKIP
        assert coerce_instruction(("convert", "-strip", "png")) == Command("convert", "-strip", "png")

    def test_callable_becomes_custom_function(self):
        def fn(version, artifact):
            return artifact

        instruction = coerce_instruction(fn)
        assert isinstance(instruction, CustomFunction)
        assert instruction.fn is fn

    def test_unknown_value_is_rejected(self):
        with pytest.raises(ValueError):
            coerce_instruction(42)


class NamingDefinition(Definition):
    versions = ("original", "thumb", "preview")

    def transform(self, version, artifact, scope):
        return {
            "original": NO_ACTION,
            "thumb": convert("-thumbnail 10x10", "jpg"),
            "preview": SKIP,
        }[version]

    def filename(self, version, artifact, scope):
        return f"{version}_{artifact.stem}"

    def storage_dir(self, version, artifact, scope):
        return f"uploads/{scope['id']}" if scope else "uploads"


class TestVersionNaming:
    """Test destination name resolution."""

    @pytest.fixture
    def definition(self, settings):
        return NamingDefinition(settings=settings, storage=object())

    def test_keeps_source_extension_without_output_extension(self, definition):
        artifact = Artifact(file_name="photo.png", path="/tmp/ABC.png")
        assert resolve_file_name(definition, "original", artifact, None) == "original_photo.png"

    def test_uses_output_extension(self, definition):
        artifact = Artifact(file_name="photo.png", path="/tmp/ABC.png")
        assert resolve_file_name(definition, "thumb", artifact, None) == "thumb_photo.jpg"

    def test_skipped_version_has_no_name(self, definition):
        assert resolve_file_name(definition, "preview", StoredFile("photo.png"), None) is None
        assert storage_key(definition, "preview", StoredFile("photo.png"), None) is None

    def test_naming_is_idempotent(self, definition):
        stored = StoredFile("photo.png")
        first = resolve_file_name(definition, "thumb", stored, None)
        assert first == resolve_file_name(definition, "thumb", stored, None)

    def test_extension_comes_from_display_name(self, definition):
        artifact = Artifact(file_name="photo.png", path="/tmp/UNRELATED.tmp")
        assert resolve_file_name(definition, "original", artifact, None) == "original_photo.png"

    def test_storage_key_joins_directory(self, definition):
        assert storage_key(definition, "thumb", StoredFile("photo.png"), {"id": 7}) == (
            "uploads/7/thumb_photo.jpg"
        )


class TestInstructionReprs:
    def test_singletons(self):
        assert isinstance(NO_ACTION, NoAction)
        assert isinstance(SKIP, Skip)
        assert repr(NO_ACTION) == "NO_ACTION"
        assert repr(SKIP) == "SKIP"
