"""Test module for main.py functionality."""

from unittest.mock import patch

import pytest

from openasset_client.admin.batching import MigrationProgress, plan_batches
from openasset_client.admin.move_keywords import BatchOutcome, MigrationReport
from openasset_client.main import configure_logging, main, parse_arguments
from openasset_client.models import Album, Field, PreconditionError


def test_main_help(capsys):
    """Test that the main help message is displayed correctly."""
    with pytest.raises(SystemExit) as exc_info:
        parse_arguments(["-h"])

    assert exc_info.value.code == 0
    help_output = capsys.readouterr().out

    assert "OpenAsset REST client" in help_output
    assert "--url" in help_output
    assert "--dry-run" in help_output
    for cmd in {"move-keywords", "list-fields", "list-keyword-categories"}:
        assert cmd in help_output


@pytest.mark.parametrize("command", ["move-keywords", "list-fields", "list-keyword-categories"])
def test_subcommand_help(command, capsys):
    """Test that each subcommand's help message is displayed correctly."""
    with pytest.raises(SystemExit) as exc_info:
        parse_arguments([command, "-h"])

    assert exc_info.value.code == 0
    help_output = capsys.readouterr().out
    assert command in help_output

    if command == "move-keywords":
        assert "--keyword-category" in help_output
        assert "--insert-mode" in help_output
        assert "--batch-size" in help_output
    elif command == "list-fields":
        assert "--name" in help_output


def test_move_keywords_defaults():
    args = parse_arguments(["move-keywords", "7", "12", "--keyword-category", "4"])

    assert args.album == "7"
    assert args.target_field == "12"
    assert args.keyword_categories == ["4"]
    assert args.separator == ";"
    assert args.insert_mode == "append"
    assert args.batch_size == 200


def test_move_keywords_rejects_unknown_insert_mode():
    with pytest.raises(SystemExit):
        parse_arguments(
            ["move-keywords", "7", "12", "--keyword-category", "4", "--insert-mode", "prepend"]
        )


def test_url_from_environment(monkeypatch):
    monkeypatch.setenv("OPENASSET_URL", "demo.openasset.com")

    args = parse_arguments(["list-fields"])

    assert args.url == "demo.openasset.com"


def test_configure_logging_rejects_unknown_level():
    with pytest.raises(ValueError):
        configure_logging("chatty")


def test_main_requires_url(monkeypatch):
    monkeypatch.delenv("OPENASSET_URL", raising=False)

    assert main(["list-fields"]) == 1


@patch("openasset_client.main.create_session")
def test_list_fields(mock_create_session, capsys):
    """Test that fields are listed in a table."""
    with patch("openasset_client.main.RestClient.get_fields") as mock_get_fields:
        mock_get_fields.return_value = [
            Field(id=12, name="Building Types", field_type="image", field_display_type="singleLine")
        ]

        code = main(["--url", "demo.openasset.com", "list-fields", "--name", "Building Types"])

    assert code == 0
    options = mock_get_fields.call_args.args[0]
    assert options.to_params() == {
        "limit": "0",
        "name": "Building Types",
        "textMatching": "exact",
    }
    output = capsys.readouterr().out
    assert "Building Types" in output
    assert "singleLine" in output


@patch("openasset_client.main.create_session")
def test_list_keyword_categories_empty(mock_create_session, capsys):
    with patch("openasset_client.main.RestClient.get_keyword_categories", return_value=[]):
        code = main(["--url", "demo.openasset.com", "list-keyword-categories"])

    assert code == 0
    assert "No keyword categories found" in capsys.readouterr().out


@patch("openasset_client.main.create_session")
@patch("openasset_client.main.KeywordFieldMigrator")
def test_move_keywords_prints_summary(mock_migrator_class, mock_create_session, capsys):
    """Test that the migration report is rendered."""
    plans = plan_batches([1, 2, 3], 2)
    report = MigrationReport(
        album=Album(id=7, name="Spring Shoot", file_ids=[1, 2, 3]),
        target_field=Field(id=12, name="Building Types"),
        keyword_count=3,
        progress=MigrationProgress().advance(plans[0]).advance(plans[1], failed=True),
        batches=[BatchOutcome(plan=plans[0], files_changed=2), BatchOutcome(plan=plans[1])],
    )
    mock_migrator_class.return_value.move_keywords_to_field.return_value = report

    code = main(
        [
            "--url", "demo.openasset.com",
            "move-keywords", "7", "12",
            "--keyword-category", "4",
            "--keyword-category", "9",
            "--insert-mode", "overwrite",
            "--batch-size", "50",
        ]
    )

    assert code == 0
    mock_migrator_class.return_value.move_keywords_to_field.assert_called_once_with(
        "7", ["4", "9"], "12", ";", "overwrite", 50
    )
    output = capsys.readouterr().out
    assert "Batch summary:" in output
    assert "Processed 3 files in album 'Spring Shoot'" in output
    assert "Failed batches: 2" in output


@patch("openasset_client.main.create_session")
@patch("openasset_client.main.KeywordFieldMigrator")
def test_move_keywords_precondition_failure_exits_nonzero(
    mock_migrator_class, mock_create_session, caplog
):
    mock_migrator_class.return_value.move_keywords_to_field.side_effect = PreconditionError(
        "No files found in album 'Empty' with id 7."
    )

    code = main(["--url", "demo.openasset.com", "move-keywords", "7", "12",
                 "--keyword-category", "4"])

    assert code == 1
    assert "No files found in album 'Empty'" in caplog.text


def test_missing_credentials_exit_nonzero(monkeypatch):
    monkeypatch.delenv("OPENASSET_USERNAME", raising=False)
    monkeypatch.delenv("OPENASSET_PASSWORD", raising=False)

    assert main(["--url", "demo.openasset.com", "list-keyword-categories"]) == 1

