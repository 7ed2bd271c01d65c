"""Tests for the CLI main module."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from tagtree.cli.main import (
    EXIT_INPUT_ERROR,
    EXIT_NOT_FOUND,
    EXIT_OK,
    CLIConfig,
    create_argument_parser,
    load_script,
    main,
)
from tagtree.shared import ConfigValidationError

DOCUMENT = [
    "<html>", "<body>",
    "<p>", "The cat sat.", "</p>",
    "<table>", "<tr>", "<td>", "x", "</td>", "</tr>", "</table>",
    "<ul>", "<li>", "item", "</li>", "</ul>",
    "</body>", "</html>",
]


@pytest.fixture(autouse=True)
def mock_configure_logging():
    """Stop CLI runs from replacing the root logging handlers."""
    with patch("tagtree.cli.main.configure_logging") as mock_configure:
        yield mock_configure


@pytest.fixture
def document(tmp_path: Path) -> Path:
    path = tmp_path / "page.html"
    path.write_text("\n".join(DOCUMENT) + "\n", encoding="utf-8")
    return path


def write_json(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestCLIConfig:
    """Test CLI configuration management."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = CLIConfig()
        assert config.tree_config.name == "default"
        assert config.encoding == "utf-8"
        assert config.verbose is False
        assert config.quiet is False
        assert config.logging_level() == "WARNING"

    def test_config_from_file(self, tmp_path: Path) -> None:
        """Test loading a TreeConfig JSON file."""
        path = write_json(tmp_path / "config.json", {"editor": {"bold_label": "strong"}})
        config = CLIConfig.from_file(path)
        assert config.tree_config.editor.bold_label == "strong"

    def test_config_from_invalid_file(self, tmp_path: Path) -> None:
        """Test invalid configuration files raise."""
        path = write_json(tmp_path / "config.json", {"editor": {"unknown": 1}})
        with pytest.raises(ConfigValidationError):
            CLIConfig.from_file(path)

    def test_logging_level_flags(self) -> None:
        """Test verbose and quiet override the configured level."""
        config = CLIConfig()
        config.quiet = True
        assert config.logging_level() == "ERROR"
        config.verbose = True
        assert config.logging_level() == "DEBUG"

    def test_from_args_uses_preset(self, document: Path) -> None:
        """Test the preset is used when no file is given."""
        args = create_argument_parser().parse_args(["render", str(document), "--preset", "lenient"])
        config = CLIConfig.from_args(args)
        assert config.tree_config.parser.match_closing_tags is False


class TestArgumentParser:
    """Test argument parsing."""

    def test_subcommands(self) -> None:
        """Test each subcommand parses its positional arguments."""
        parser = create_argument_parser()

        args = parser.parse_args(["bold-row", "f.html", "2"])
        assert args.command == "bold-row"
        assert args.row == 2

        args = parser.parse_args(["add-tag", "f.html", "cat", "b", "-o", "out.html"])
        assert (args.word, args.tag) == ("cat", "b")
        assert args.output == Path("out.html")

        args = parser.parse_args(["-v", "stats", "f.html", "--format", "json"])
        assert args.verbose
        assert args.format == "json"

    def test_invalid_row_type(self) -> None:
        """Test non-integer rows are rejected by argparse."""
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args(["bold-row", "f.html", "two"])


class TestLoadScript:
    """Test edit script validation."""

    def test_valid_script(self, tmp_path: Path) -> None:
        """Test a valid script resolves to DOMTree methods."""
        path = write_json(tmp_path / "edits.json", [
            {"op": "replace", "args": ["p", "div"]},
            {"op": "bold-row", "args": [1]},
        ])
        steps = load_script(path)
        assert [step["method"] for step in steps] == ["replace_tag", "bold_row"]

    @pytest.mark.parametrize("script", [
        {"op": "remove"},
        [{"op": "explode", "args": []}],
        [{"op": "remove", "args": ["a", "b"]}],
        [{"op": "bold-row", "args": ["1"]}],
        [{"op": "bold-row", "args": [True]}],
        ["remove"],
    ])
    def test_invalid_scripts(self, tmp_path: Path, script) -> None:
        """Test malformed scripts raise ValueError."""
        path = write_json(tmp_path / "edits.json", script)
        with pytest.raises(ValueError):
            load_script(path)

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Test unreadable JSON raises ValueError."""
        path = tmp_path / "edits.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid script JSON"):
            load_script(path)


class TestMain:
    """Test command execution and exit codes."""

    def test_no_command(self, capsys: pytest.CaptureFixture) -> None:
        """Test running without a command prints help."""
        assert main([]) == EXIT_INPUT_ERROR
        assert "usage" in capsys.readouterr().out

    def test_render(self, document: Path, capsys: pytest.CaptureFixture) -> None:
        """Test render prints the document."""
        assert main(["render", str(document)]) == EXIT_OK
        assert capsys.readouterr().out == "\n".join(DOCUMENT) + "\n"

    def test_replace(self, document: Path, capsys: pytest.CaptureFixture) -> None:
        """Test replace relabels elements."""
        assert main(["replace", str(document), "p", "div"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "<div>" in out
        assert "<p>" not in out

    def test_bold_row_found(self, document: Path, capsys: pytest.CaptureFixture) -> None:
        """Test bold-row edits the table."""
        assert main(["bold-row", str(document), "1"]) == EXIT_OK
        assert "<td>\n<b>\nx\n</b>\n</td>" in capsys.readouterr().out

    def test_bold_row_not_found(self, document: Path, capsys: pytest.CaptureFixture) -> None:
        """Test a missing row exits with the not-found code."""
        assert main(["bold-row", str(document), "4"]) == EXIT_NOT_FOUND
        captured = capsys.readouterr()
        assert captured.out == "\n".join(DOCUMENT) + "\n"
        assert "The given row does not exist" in captured.err

    def test_bold_row_not_found_quiet(self, document: Path, capsys: pytest.CaptureFixture) -> None:
        """Test quiet mode suppresses the warning line."""
        assert main(["-q", "bold-row", str(document), "4"]) == EXIT_NOT_FOUND
        assert capsys.readouterr().err == ""

    def test_strict_preset_reports_details(self, document: Path,
                                           capsys: pytest.CaptureFixture) -> None:
        """Test detailed diagnostics include component and details."""
        assert main(["bold-row", str(document), "4", "--preset", "strict"]) == EXIT_NOT_FOUND
        err = capsys.readouterr().err
        assert 'Warning: The given row does not exist [structural_editor] {"row": 4}' in err

    def test_minimal_detail_level(self, document: Path, tmp_path: Path,
                                  capsys: pytest.CaptureFixture) -> None:
        """Test minimal diagnostics print one line per failed edit."""
        config = write_json(
            tmp_path / "config.json", {"global_": {"diagnostic_detail_level": "minimal"}}
        )
        assert main(["bold-row", str(document), "4", "-c", str(config)]) == EXIT_NOT_FOUND
        err = capsys.readouterr().err
        assert "Warning: bold_row found nothing to edit" in err
        assert "The given row does not exist" not in err

    def test_remove(self, document: Path, capsys: pytest.CaptureFixture) -> None:
        """Test remove converts list items."""
        assert main(["remove", str(document), "ul"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "<li>" not in out
        assert "<p>\nitem\n</p>" in out

    def test_add_tag_to_output_file(self, document: Path, tmp_path: Path,
                                    capsys: pytest.CaptureFixture) -> None:
        """Test add-tag writes to the output file."""
        output = tmp_path / "out.html"
        assert main(["add-tag", str(document), "cat", "em", "-o", str(output)]) == EXIT_OK

        assert "The \n<em>\ncat\n</em>\n sat." in output.read_text(encoding="utf-8")
        assert "Output written to" in capsys.readouterr().err

    def test_stats_json(self, document: Path, capsys: pytest.CaptureFixture) -> None:
        """Test JSON statistics output."""
        assert main(["stats", str(document), "--format", "json"]) == EXIT_OK
        data = json.loads(capsys.readouterr().out)
        assert data["tree"]["leaf_count"] == 3
        assert data["parse"]["lines_read"] == len(DOCUMENT)

    def test_stats_text(self, document: Path, capsys: pytest.CaptureFixture) -> None:
        """Test text statistics output."""
        assert main(["stats", str(document)]) == EXIT_OK
        out = capsys.readouterr().out
        assert "Elements: 8" in out
        assert "   td: 1" in out

    def test_apply(self, document: Path, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test a script applies edits in order."""
        script = write_json(tmp_path / "edits.json", [
            {"op": "remove", "args": ["ul"]},
            {"op": "replace", "args": ["p", "section"]},
        ])
        assert main(["apply", str(document), str(script)]) == EXIT_OK
        out = capsys.readouterr().out
        assert out.count("<section>") == 2

    def test_apply_reports_not_found(self, document: Path, tmp_path: Path) -> None:
        """Test a not-found step sets the exit code."""
        script = write_json(tmp_path / "edits.json", [{"op": "bold-row", "args": [9]}])
        assert main(["apply", str(document), str(script)]) == EXIT_NOT_FOUND

    def test_apply_invalid_script(self, document: Path, tmp_path: Path,
                                  capsys: pytest.CaptureFixture) -> None:
        """Test an invalid script is an input error."""
        script = write_json(tmp_path / "edits.json", {"op": "remove"})
        assert main(["apply", str(document), str(script)]) == EXIT_INPUT_ERROR
        assert "Error:" in capsys.readouterr().err

    def test_parse_error(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test malformed markup is an input error."""
        path = tmp_path / "bad.html"
        path.write_text("<html>\n<p>\n</html>\n", encoding="utf-8")
        assert main(["render", str(path)]) == EXIT_INPUT_ERROR
        assert "Parse error" in capsys.readouterr().err

    def test_lenient_preset_accepts_mismatch(self, tmp_path: Path) -> None:
        """Test the lenient preset tolerates mismatched closing names."""
        path = tmp_path / "loose.html"
        path.write_text("<html>\n<p>\nx\n</b>\n</html>\n", encoding="utf-8")
        assert main(["render", str(path), "--preset", "lenient"]) == EXIT_OK

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test a missing input file is an input error."""
        assert main(["render", str(tmp_path / "missing.html")]) == EXIT_INPUT_ERROR
        assert "Error:" in capsys.readouterr().err

    def test_invalid_config_file(self, document: Path, tmp_path: Path) -> None:
        """Test an invalid configuration file is an input error."""
        config = write_json(tmp_path / "config.json", {"parser": {"root_label": "a b"}})
        assert main(["render", str(document), "-c", str(config)]) == EXIT_INPUT_ERROR

    def test_empty_word_is_input_error(self, document: Path) -> None:
        """Test invalid edit arguments are an input error."""
        assert main(["add-tag", str(document), "", "b"]) == EXIT_INPUT_ERROR

    def test_verbose_configures_debug_logging(self, document: Path, mock_configure_logging) -> None:
        """Test -v sets the DEBUG level."""
        main(["-v", "render", str(document)])
        mock_configure_logging.assert_called_once_with("DEBUG")
