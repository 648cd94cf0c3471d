# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the YAML loader used by the prompt catalog."""

from pathlib import Path

import pytest

from src.core.config.yaml_loader import (
    YAMLLoadError,
    deep_merge,
    load_yaml,
    load_yaml_directory,
    load_yaml_with_override,
)


class TestLoadYaml:
    """Tests for load_yaml function."""

    def test_load_catalog_file(self, tmp_path: Path) -> None:
        """Test loading a catalog file with nested templates."""
        path = tmp_path / "chat.yaml"
        path.write_text(
            "busy_notice: Still working\n"
            "classifier:\n"
            "  system: Reply with one word\n"
        )

        result = load_yaml(path)

        assert result == {
            "busy_notice": "Still working",
            "classifier": {"system": "Reply with one word"},
        }

    def test_block_scalar_keeps_newlines(self, tmp_path: Path) -> None:
        """Test that |- templates keep their line breaks."""
        path = tmp_path / "plan.yaml"
        path.write_text("ack: |-\n  I'll answer this in {count} parts:\n\n  {summary}\n")

        result = load_yaml(path)

        assert result["ack"] == "I'll answer this in {count} parts:\n\n{summary}"

    def test_empty_and_comment_only_files_return_empty_dict(self, tmp_path: Path) -> None:
        """Test that files without content load as empty mappings."""
        empty = tmp_path / "empty.yaml"
        empty.write_text("")
        comments = tmp_path / "comments.yaml"
        comments.write_text("# nothing here yet\n")

        assert load_yaml(empty) == {}
        assert load_yaml(comments) == {}

    def test_list_root_raises_error(self, tmp_path: Path) -> None:
        """Test that a catalog file must be a mapping."""
        path = tmp_path / "steps.yaml"
        path.write_text("- Step 1\n- Step 2\n")

        with pytest.raises(YAMLLoadError) as exc_info:
            load_yaml(path)

        assert "must be a mapping" in str(exc_info.value)

    def test_missing_file_raises_error(self, tmp_path: Path) -> None:
        """Test that a missing file is reported."""
        with pytest.raises(YAMLLoadError) as exc_info:
            load_yaml(tmp_path / "missing.yaml")

        assert "File does not exist" in str(exc_info.value)

    def test_directory_raises_error(self, tmp_path: Path) -> None:
        """Test that a directory is not accepted as a file."""
        with pytest.raises(YAMLLoadError) as exc_info:
            load_yaml(tmp_path)

        assert "Path is not a file" in str(exc_info.value)

    def test_invalid_syntax_raises_error(self, tmp_path: Path) -> None:
        """Test that broken YAML is reported as a load error."""
        path = tmp_path / "broken.yaml"
        path.write_text("key: [unclosed\n")

        with pytest.raises(YAMLLoadError) as exc_info:
            load_yaml(path)

        assert "Invalid YAML syntax" in str(exc_info.value)


class TestLoadYamlDirectory:
    """Tests for load_yaml_directory function."""

    def test_files_keyed_by_stem(self, tmp_path: Path) -> None:
        """Test that each file becomes one catalog section."""
        (tmp_path / "chat.yaml").write_text("busy_notice: busy\n")
        (tmp_path / "tools.yml").write_text("descriptions: {}\n")

        result = load_yaml_directory(tmp_path)

        assert result == {"chat": {"busy_notice": "busy"}, "tools": {"descriptions": {}}}

    def test_yml_wins_over_yaml_with_same_stem(self, tmp_path: Path) -> None:
        """Test that chat.yml is read after chat.yaml."""
        (tmp_path / "chat.yaml").write_text("source: yaml\n")
        (tmp_path / "chat.yml").write_text("source: yml\n")

        result = load_yaml_directory(tmp_path)

        assert result == {"chat": {"source": "yml"}}

    def test_non_yaml_files_ignored(self, tmp_path: Path) -> None:
        """Test that other files in the directory are skipped."""
        (tmp_path / "chat.yaml").write_text("key: value\n")
        (tmp_path / "README.md").write_text("# Prompts\n")

        assert load_yaml_directory(tmp_path) == {"chat": {"key": "value"}}

    def test_empty_directory_returns_empty_dict(self, tmp_path: Path) -> None:
        """Test that an empty directory loads as no sections."""
        assert load_yaml_directory(tmp_path) == {}

    def test_missing_directory_raises_error(self, tmp_path: Path) -> None:
        """Test that a missing directory is reported."""
        with pytest.raises(YAMLLoadError) as exc_info:
            load_yaml_directory(tmp_path / "prompts")

        assert "Directory does not exist" in str(exc_info.value)

    def test_file_instead_of_directory_raises_error(self, tmp_path: Path) -> None:
        """Test that a file path is rejected."""
        path = tmp_path / "chat.yaml"
        path.write_text("key: value\n")

        with pytest.raises(YAMLLoadError) as exc_info:
            load_yaml_directory(path)

        assert "Path is not a directory" in str(exc_info.value)


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_nested_sections_merged(self) -> None:
        """Test that an override replaces single templates only."""
        base = {"chat": {"busy_notice": "busy", "empty_reply": "empty"}}
        override = {"chat": {"busy_notice": "Please wait"}}

        assert deep_merge(base, override) == {
            "chat": {"busy_notice": "Please wait", "empty_reply": "empty"}
        }

    def test_non_mapping_replaces_value(self) -> None:
        """Test that lists and scalars are replaced, not merged."""
        base = {"a": {"b": 1}, "items": [1, 2]}
        override = {"a": "flat", "items": [3]}

        assert deep_merge(base, override) == {"a": "flat", "items": [3]}

    def test_inputs_not_modified(self) -> None:
        """Test that neither input dictionary changes."""
        base = {"a": {"b": 1}}
        override = {"a": {"c": 2}}

        deep_merge(base, override)

        assert base == {"a": {"b": 1}}
        assert override == {"a": {"c": 2}}


class TestLoadYamlWithOverride:
    """Tests for load_yaml_with_override function."""

    def test_without_override_loads_directory(self, tmp_path: Path) -> None:
        """Test that no override file means the plain directory."""
        (tmp_path / "chat.yaml").write_text("busy_notice: busy\n")

        assert load_yaml_with_override(tmp_path) == {"chat": {"busy_notice": "busy"}}

    def test_override_file_is_merged(self, tmp_path: Path) -> None:
        """Test that the override file is keyed by section name."""
        prompts = tmp_path / "prompts"
        prompts.mkdir()
        (prompts / "chat.yaml").write_text("busy_notice: busy\nempty_reply: empty\n")
        override = tmp_path / "override.yaml"
        override.write_text("chat:\n  busy_notice: Hold on\n")

        result = load_yaml_with_override(prompts, override)

        assert result == {"chat": {"busy_notice": "Hold on", "empty_reply": "empty"}}

    def test_missing_override_raises_error(self, tmp_path: Path) -> None:
        """Test that a configured but missing override is an error."""
        with pytest.raises(YAMLLoadError):
            load_yaml_with_override(tmp_path, tmp_path / "missing.yaml")


class TestYAMLLoadError:
    """Tests for YAMLLoadError exception."""

    def test_error_contains_path_and_reason(self) -> None:
        """Test that error message contains path and reason."""
        path = Path("/etc/studypilot/chat.yaml")

        error = YAMLLoadError(path, "File does not exist")

        assert str(path) in str(error)
        assert error.path == path
        assert error.reason == "File does not exist"
