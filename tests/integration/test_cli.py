"""
Integration tests for the command-line interface (cli/strip.py).

Tests cover:
- Printing transformed files
- In-place rewriting of a directory tree
- Filtering stdin
- Strict mode exit status
- Usage errors and file errors
"""

import io

import pytest

from annotation_stripper.cli.strip import build_parser, main
from tests.fixtures.java_sources import MODULE_INFO_STRIPPED, NULLNESS_ANNOTATIONS_STRIPPED


def feed_stdin(monkeypatch, data: bytes):
    monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(data), encoding="utf-8"))


class TestPrintMode:
    """Tests for printing results to stdout."""

    @pytest.mark.integration
    def test_print_file(self, java_tree, capsys):
        """Test that a file is printed with its path header."""
        path = java_tree["module_info"]

        exit_code = main(["-n", "Deprecated", str(path)])

        captured = capsys.readouterr()
        assert exit_code == 0
        assert captured.out == f"{path}:\n{MODULE_INFO_STRIPPED}\n"
        assert "@Deprecated" in path.read_text(encoding="utf-8")

    @pytest.mark.integration
    def test_stdin_filter(self, monkeypatch, capsys):
        """Test filtering stdin to stdout."""
        feed_stdin(monkeypatch, b"@Deprecated\nint foo;\n")

        exit_code = main(["-n", "Deprecated"])

        assert exit_code == 0
        assert capsys.readouterr().out == "int foo;\n"

    @pytest.mark.integration
    def test_stdin_error(self, monkeypatch, capsys):
        """Test that a malformed stdin text fails with its location."""
        feed_stdin(monkeypatch, b"int x;\n/* open\n")

        exit_code = main(["-n", "Deprecated"])

        captured = capsys.readouterr()
        assert exit_code == 2
        assert captured.out == ""
        assert "UnterminatedToken at line 2, column 1" in captured.err

    @pytest.mark.integration
    def test_whitespace_option(self, monkeypatch, capsys):
        """Test selecting the whitespace policy."""
        feed_stdin(monkeypatch, b"@A\nint x;\n")

        exit_code = main(["-n", "A", "--whitespace", "none"])

        assert exit_code == 0
        assert capsys.readouterr().out == "\nint x;\n"


class TestInPlaceMode:
    """Tests for rewriting files in place."""

    @pytest.mark.integration
    def test_in_place_directory(self, java_tree, capsys):
        """Test rewriting a tree with qualified names and import removal."""
        exit_code = main(
            [
                "-i",
                "--imports",
                "-n",
                "org.jspecify.annotations.Nullable",
                "-n",
                "org.jspecify.annotations.NonNull",
                "-j",
                "2",
                str(java_tree["root"]),
            ]
        )

        captured = capsys.readouterr()
        assert exit_code == 0
        assert captured.out == ""
        assert java_tree["service"].read_text(encoding="utf-8") == NULLNESS_ANNOTATIONS_STRIPPED
        assert "Removing symbols from file" in captured.err
        assert "notes.txt" not in captured.err

    @pytest.mark.integration
    def test_strict_success(self, java_tree, capsys):
        """Test a strict run where every matcher and root was used."""
        exit_code = main(["-i", "-s", "-n", "Deprecated", str(java_tree["module_info"])])

        assert exit_code == 0
        assert java_tree["module_info"].read_text(encoding="utf-8") == MODULE_INFO_STRIPPED

    @pytest.mark.integration
    def test_strict_failure(self, java_tree, capsys):
        """Test that a redundant pattern fails a strict run."""
        exit_code = main(
            ["-i", "-s", "-n", "Deprecated", "-p", "^Absent$", str(java_tree["module_info"])]
        )

        captured = capsys.readouterr()
        assert exit_code == 1
        assert "strict mode failed" in captured.err
        assert "pattern was never matched: ^Absent$" in captured.err

    @pytest.mark.integration
    def test_broken_file_exit_status(self, java_tree, capsys):
        """Test that a failing file gives exit status 2 and is reported."""
        broken = java_tree["root"] / "Broken.java"
        broken.write_text("@Deprecated /* \n", encoding="utf-8")

        exit_code = main(["-i", "-n", "Deprecated", str(java_tree["root"])])

        captured = capsys.readouterr()
        assert exit_code == 2
        assert "errors occurred during the process" in captured.err
        assert f"{broken}: UnterminatedToken at line 1, column 13" in captured.err
        assert java_tree["module_info"].read_text(encoding="utf-8") == MODULE_INFO_STRIPPED


class TestUsageErrors:
    """Tests for invalid invocations."""

    @pytest.mark.integration
    @pytest.mark.parametrize(
        "argv,message",
        [
            (["Foo.java"], "no matcher specified"),
            (["-s", "-n", "A", "Foo.java"], "--strict requires --in-place"),
            (["--no-annotations", "-n", "A", "Foo.java"], "leaves nothing to remove"),
            (["-j", "0", "-n", "A", "Foo.java"], "--jobs must be at least 1"),
            (["-n", "1A", "Foo.java"], "invalid matcher"),
            (["-p", "(", "Foo.java"], "invalid matcher"),
            (["-i", "-n", "A"], "no input files"),
        ],
    )
    def test_usage_errors(self, argv, message, capsys):
        """Test that invalid option combinations exit with status 1."""
        exit_code = main(argv)

        assert exit_code == 1
        assert message in capsys.readouterr().err

    @pytest.mark.integration
    def test_missing_path(self, tmp_path, capsys):
        """Test that a missing input path exits with status 2."""
        exit_code = main(["-n", "A", str(tmp_path / "Missing.java")])

        assert exit_code == 2
        assert "File does not exist" in capsys.readouterr().err

    @pytest.mark.integration
    def test_empty_directory(self, tmp_path, capsys):
        """Test that a directory without sources is an error."""
        exit_code = main(["-n", "A", str(tmp_path)])

        assert exit_code == 1
        assert "no valid input files" in capsys.readouterr().err

    @pytest.mark.integration
    def test_version(self, capsys):
        """Test the version flag."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert "annotation-stripper" in capsys.readouterr().out


class TestBuildParser:
    """Tests for build_parser() function."""

    @pytest.mark.unit
    def test_repeatable_matchers(self):
        """Test that names and patterns accumulate."""
        args = build_parser().parse_args(["-n", "A", "--name", "b.C", "-p", "x", "Foo.java"])

        assert args.name == ["A", "b.C"]
        assert args.pattern == ["x"]
        assert args.paths == ["Foo.java"]
        assert not args.in_place
