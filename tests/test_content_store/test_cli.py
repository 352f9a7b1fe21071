"""Tests for content store CLI commands."""

import json

import pytest
from click.testing import CliRunner

from app.content_store.cli import cli
from app.content_store.config import set_content_repository


@pytest.fixture
def runner(memory_repository) -> CliRunner:
    set_content_repository(memory_repository)
    return CliRunner()


class TestCLICommands:
    """Test CLI commands for content store."""

    def test_cli_group(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Content store management commands" in result.output

    def test_list_hides_hidden_entries(self, runner):
        result = runner.invoke(cli, ["list"])

        assert result.exit_code == 0
        assert "heroTitle <text> (home): Bienvenido" in result.output
        assert "draftNotice" not in result.output

    def test_list_all_in_english(self, runner):
        result = runner.invoke(cli, ["list", "--all", "--lang", "en", "--page", "home"])

        assert result.exit_code == 0
        assert "heroTitle <text> (home): Welcome" in result.output
        assert "draftNotice <text> (home) [hidden]: Próximamente" in result.output
        assert "heroVideo" not in result.output

    def test_list_empty(self, runner):
        result = runner.invoke(cli, ["list", "--page", "nowhere"])

        assert result.exit_code == 0
        assert "No content found" in result.output

    def test_list_repository_failure(self, runner, memory_repository):
        memory_repository.fail_get = True

        result = runner.invoke(cli, ["list"])

        assert result.exit_code == 1
        assert "Firestore unreachable" in result.output

    def test_get_resolves_language(self, runner):
        result = runner.invoke(cli, ["get", "heroTitle", "--lang", "en"])

        assert result.exit_code == 0
        assert result.output.strip() == "Welcome"

    def test_get_missing_key_prints_default(self, runner):
        result = runner.invoke(cli, ["get", "nothing", "--default", "Por defecto"])

        assert result.exit_code == 0
        assert result.output.strip() == "Por defecto"

    def test_set_one_language(self, runner, memory_repository):
        result = runner.invoke(cli, ["set", "heroSubtitle1", "A sacred space", "--lang", "en"])

        assert result.exit_code == 0
        assert "Saved heroSubtitle1" in result.output
        assert memory_repository.documents["heroSubtitle1"]["value"] == {
            "es": "Un espacio sagrado",
            "en": "A sacred space",
        }

    def test_set_media_hidden(self, runner, memory_repository):
        result = runner.invoke(
            cli,
            ["set", "introVideo", "https://cdn/intro.mp4", "--type", "media", "--hidden"],
        )

        assert result.exit_code == 0
        assert memory_repository.documents["introVideo"] == {
            "value": "https://cdn/intro.mp4",
            "type": "media",
            "visible": False,
        }

    def test_set_unsupported_language_fails(self, runner):
        result = runner.invoke(cli, ["set", "heroTitle", "Salut", "--lang", "fr"])

        assert result.exit_code == 1
        assert "Unsupported language" in result.output

    def test_set_rejected_write_fails(self, runner, memory_repository):
        memory_repository.fail_set = True

        result = runner.invoke(cli, ["set", "heroTitle", "x"])

        assert result.exit_code == 1
        assert "Could not save content 'heroTitle'" in result.output

    def test_export_and_import(self, runner, memory_repository, tmp_path):
        backup_file = tmp_path / "backup.json"

        result = runner.invoke(cli, ["export", "-o", str(backup_file)])
        assert result.exit_code == 0
        assert "Exported 5 entries" in result.output

        data = json.loads(backup_file.read_text(encoding="utf-8"))
        data["content"] = [item for item in data["content"] if item["id"] == "heroTitle"]
        data["content"][0]["value"]["en"] = "Welcome back"
        backup_file.write_text(json.dumps(data), encoding="utf-8")

        result = runner.invoke(cli, ["import", str(backup_file)])
        assert result.exit_code == 0
        assert "Imported 1 entries" in result.output
        assert memory_repository.documents["heroTitle"]["value"]["en"] == "Welcome back"

    def test_export_to_stdout(self, runner):
        result = runner.invoke(cli, ["export"])

        assert result.exit_code == 0
        assert json.loads(result.output)["content"]

    def test_import_invalid_file(self, runner, tmp_path):
        backup_file = tmp_path / "backup.json"
        backup_file.write_text(json.dumps({"content": [{"id": "k"}]}), encoding="utf-8")

        result = runner.invoke(cli, ["import", str(backup_file)])

        assert result.exit_code == 1
        assert "Error" in result.output
