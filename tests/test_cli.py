"""
Tests for wordlen CLI.
"""

import json
import pytest
import tempfile
from pathlib import Path

from wordlen.cli import main, create_parser, problem_to_dict
from wordlen.core.parser import parse
from wordlen.preprocessing.formula_preprocess import DEFAULT_UNDERAPPROX_WINDOW


class TestSolveCommand:
    """Tests for the solve command"""

    def test_solve_sat(self, capsys):
        """Test solving a satisfiable problem"""
        result = main(["solve", 'x = "ab" ++ y & y = "c"'])
        captured = capsys.readouterr()
        assert result == 0
        assert captured.out.startswith("sat")
        assert "|x| = 3" in captured.out

    def test_solve_unsat(self, capsys):
        """Test solving an unsatisfiable problem"""
        result = main(["solve", 'x = "ab" ++ y & x = "ba" ++ z'])
        captured = capsys.readouterr()
        assert result == 0
        assert captured.out.startswith("unsat")

    def test_solve_unknown(self, capsys):
        """Test a problem outside the fragment"""
        result = main(["solve", 'x = y ++ z & x != "c"'])
        captured = capsys.readouterr()
        assert result == 0
        assert "unknown: length procedure not applicable" in captured.out

    def test_solve_json_format(self, capsys):
        """Test JSON output format"""
        result = main(["solve", 'x = y ++ "a"', "--format", "json", "--show-formula"])
        captured = capsys.readouterr()
        assert result == 0
        data = json.loads(captured.out)
        assert data["status"] == "sat"
        assert data["precision"] == "exact"
        assert "time_ms" in data
        assert "length_formula" in data

    def test_solve_verbose(self, capsys):
        """Test verbose output"""
        result = main(["solve", 'x = y ++ "a"', "--verbose"])
        captured = capsys.readouterr()
        assert result == 0
        assert "Time:" in captured.out
        assert "len: " in captured.out

    def test_solve_from_file(self, capsys):
        """Test reading a problem from file"""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.txt', delete=False) as f:
            f.write('x = y ++ "a"\ny = "b"\n')
            f.flush()
            result = main(["solve", "-f", f.name])

        captured = capsys.readouterr()
        assert result == 0
        assert captured.out.startswith("sat")
        Path(f.name).unlink()

    def test_solve_no_input_error(self, capsys):
        """Test error when no input provided"""
        result = main(["solve"])
        captured = capsys.readouterr()
        assert result == 1
        assert "Error" in captured.err

    def test_solve_parse_error(self, capsys):
        """Test error on malformed input"""
        result = main(["solve", "x = = y"])
        captured = capsys.readouterr()
        assert result == 1
        assert "Error" in captured.err

    def test_solve_no_underapprox(self, capsys):
        """Test disabling under-approximation"""
        result = main(["solve", 'x = y ++ "b" & !(x matches /a/)', "--no-underapprox"])
        captured = capsys.readouterr()
        assert result == 0
        assert captured.out.startswith("unknown")


class TestCheckCommand:
    """Tests for the check command"""

    def test_check_batch(self, capsys):
        """Test batch checking of problems"""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.txt', delete=False) as f:
            f.write("# Comment line\n")
            f.write('x = "ab" ++ y\n')
            f.write('x = y ++ "a" & y = "a" ++ z\n')
            f.write('x = "a" & x = "b"\n')
            f.flush()
            result = main(["check", f.name])

        captured = capsys.readouterr()
        assert result == 0
        assert "Sat: 2" in captured.out
        assert "Unsat: 1" in captured.out
        Path(f.name).unlink()

    def test_check_with_errors(self, capsys):
        """Test batch with malformed problems"""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.txt', delete=False) as f:
            f.write('x = "a"\n')
            f.write('x = = y\n')
            f.flush()
            result = main(["check", f.name])

        captured = capsys.readouterr()
        assert result == 1
        assert "Errors: 1" in captured.out
        Path(f.name).unlink()

    def test_check_json_format(self, capsys):
        """Test JSON output format for check"""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.txt', delete=False) as f:
            f.write('x = y ++ z & x != "c"\n')
            f.flush()
            result = main(["check", f.name, "--format", "json"])

        captured = capsys.readouterr()
        assert result == 0
        data = json.loads(captured.out)
        assert data["unknown"] == 1
        assert len(data["results"]) == 1
        Path(f.name).unlink()

    def test_check_missing_file(self, capsys):
        """Test error on a missing file"""
        result = main(["check", "/nonexistent/problems.txt"])
        captured = capsys.readouterr()
        assert result == 1
        assert "Error reading file" in captured.err


class TestParseCommand:
    """Tests for the parse command"""

    def test_parse_text_format(self, capsys):
        """Test text output"""
        result = main(["parse", 'x = y ++ "ab" & x matches /a*/'])
        captured = capsys.readouterr()
        assert result == 0
        assert 'x = y ++ "ab"' in captured.out
        assert "x in " in captured.out

    def test_parse_json_format(self, capsys):
        """Test JSON output format"""
        result = main(["parse", 'x != "c"', "--format", "json"])
        captured = capsys.readouterr()
        assert result == 0
        data = json.loads(captured.out)
        assert data["predicates"][0]["type"] == "inequation"
        assert data["predicates"][0]["right"] == [{"type": "literal", "name": "c"}]

    def test_parse_error(self, capsys):
        """Test parse error output"""
        result = main(["parse", 'x = "unterminated'])
        captured = capsys.readouterr()
        assert result == 1
        assert "Parse error" in captured.err


class TestLengthsCommand:
    """Tests for the lengths command"""

    def test_lengths_applicable(self, capsys):
        """Test printing the length formula"""
        result = main(["lengths", 'x = "ab"'])
        captured = capsys.readouterr()
        assert result == 0
        assert captured.out.startswith("applicable (exact)")
        assert "B!lit!0!IN!x" in captured.out

    def test_lengths_inapplicable(self, capsys):
        """Test printing the reason the procedure does not apply"""
        result = main(["lengths", 'x = y & y = x', "--no-preprocess"])
        captured = capsys.readouterr()
        assert result == 0
        assert "inapplicable: cyclic dependency through x" in captured.out


class TestHelpers:
    """Tests for CLI helper functions"""

    def test_problem_to_dict(self):
        """Test conversion of a parsed problem"""
        formula, store = parse('x = y & y matches /ab/')
        data = problem_to_dict(formula, store)
        assert data["predicates"] == [{
            "type": "equation",
            "left": [{"type": "variable", "name": "x"}],
            "right": [{"type": "variable", "name": "y"}],
        }]
        assert "y" in data["languages"]

    def test_window_default(self):
        """The window option defaults to the preprocessor's window"""
        for command in ("solve", "lengths"):
            args = create_parser().parse_args([command, "x = y"])
            assert args.window == DEFAULT_UNDERAPPROX_WINDOW
        assert create_parser().parse_args(["solve", "x = y", "--window", "3"]).window == 3


class TestMainEntry:
    """Tests for main entry point"""

    def test_no_command(self, capsys):
        """Test running without a command"""
        result = main([])
        captured = capsys.readouterr()
        assert result == 0
        assert "usage" in captured.out.lower()

    def test_version(self, capsys):
        """Test --version flag"""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        captured = capsys.readouterr()
        assert "wordlen" in captured.out
