"""
Unit tests for the output finalizer.
"""

import re

import pytest

from clt.core.finalizer import HEADER, TOTAL_PREFIX, finalize
from clt.errors import RecordingError

PERCENT_RE = re.compile(r"\((\d+\.\d{2})%\) –––$")

RAW = (
    "––– input –––\n"
    "echo a\n"
    "––– output –––\n"
    "a\n"
    "––– duration: 30ms (0.00%) –––\n"
    "\n"
    "––– input –––\n"
    "sleep 1\n"
    "––– output –––\n"
    "––– duration: 70ms (0.00%) –––\n"
)


class TestFinalize:
    """Unit tests for finalize."""

    def test_header_prepended(self, write_file):
        """Test header and total lines come first."""
        path = write_file("out.rec", RAW)

        total = finalize(path)

        lines = path.read_text().splitlines()
        assert total == 100
        assert lines[0] == HEADER
        assert lines[1] == f"{TOTAL_PREFIX}100ms"
        assert lines[2] == "––– input –––"

    def test_percentages_filled(self, write_file):
        """Test percentages are relative to the total and sum to about 100."""
        path = write_file("out.rec", RAW)

        finalize(path)

        text = path.read_text()
        assert "––– duration: 30ms (30.00%) –––" in text
        assert "––– duration: 70ms (70.00%) –––" in text
        percentages = [float(m.group(1)) for m in map(PERCENT_RE.search, text.splitlines()) if m]
        assert sum(percentages) == pytest.approx(100.0, abs=0.05)

    def test_explicit_total(self, write_file):
        """Test a given total overrides the sum of durations."""
        path = write_file("out.rec", RAW)

        assert finalize(path, total_ms=200) == 200

        text = path.read_text()
        assert f"{TOTAL_PREFIX}200ms" in text
        assert "––– duration: 30ms (15.00%) –––" in text

    def test_zero_total(self, write_file):
        """Test all-zero durations do not divide by zero and stay at 0.00%."""
        path = write_file(
            "out.rec",
            "––– input –––\ntrue\n––– output –––\n––– duration: 0ms (0.00%) –––\n"
            "––– input –––\n:\n––– output –––\n––– duration: 0ms (0.00%) –––\n",
        )

        assert finalize(path) == 0
        assert path.read_text().count("––– duration: 0ms (0.00%) –––") == 2

    def test_blank_lines_dropped(self, write_file):
        """Test no blank lines survive and trailing spaces are removed."""
        path = write_file("out.rec", RAW + "\n\n   \n")

        finalize(path)

        lines = path.read_text().splitlines()
        assert all(line.strip() for line in lines)
        assert all(line == line.rstrip() for line in lines)

    def test_indentation_kept(self, write_file):
        """Test leading whitespace of output lines is preserved."""
        path = write_file(
            "out.rec",
            "––– input –––\ncat f\n––– output –––\n  indented  \n––– duration: 1ms (0.00%) –––\n",
        )

        finalize(path)

        assert "  indented" in path.read_text().splitlines()

    def test_trailing_exit_stripped(self, write_file):
        """Test a final line mentioning exit is removed."""
        path = write_file("out.rec", RAW + "exit\n")

        finalize(path)

        assert path.read_text().splitlines()[-1] == "––– duration: 70ms (70.00%) –––"

    def test_exit_elsewhere_kept(self, write_file):
        """Test only the very last line is checked for exit."""
        content = "––– input –––\necho exit\n––– output –––\nexit\n––– duration: 5ms (0.00%) –––\n"
        path = write_file("out.rec", content)

        finalize(path)

        lines = path.read_text().splitlines()
        assert "echo exit" in lines
        assert lines[-1] == "––– duration: 5ms (100.00%) –––"

    def test_statement_looking_output_tolerated(self, write_file):
        """Test captured lines framed like statements are left alone."""
        content = (
            "––– input –––\ncat odd\n––– output –––\n"
            "––– weird –––\n"
            "––– duration: n/a –––\n"
            "––– duration: 4ms (0.00%) –––\n"
        )
        path = write_file("out.rec", content)

        assert finalize(path) == 4

        text = path.read_text()
        assert "––– weird –––" in text
        assert "––– duration: n/a –––" in text
        assert "––– duration: 4ms (100.00%) –––" in text

    def test_no_temporary_file_left(self, write_file, tmp_path):
        """Test the file is replaced without leftovers."""
        path = write_file("out.rec", RAW)

        finalize(path)

        assert sorted(p.name for p in tmp_path.iterdir()) == ["out.rec"]

    def test_missing_file(self, tmp_path):
        """Test an unreadable raw transcript is a recording error."""
        with pytest.raises(RecordingError) as exc_info:
            finalize(tmp_path / "missing.rec")

        assert exc_info.value.exit_code == 4
        assert exc_info.value.phase == "finalize"
