"""
Unit tests for the structured reader and writer.
"""

import json

import pytest

from clt.errors import CircularDependency, CompilationError, InputNotFound
from clt.parser.structured import (
    TestStep,
    TestStructure,
    read_test_file,
    to_rec,
    write_test_file,
)


class TestReadTestFile:
    """Unit tests for read_test_file."""

    def test_description_and_steps(self, write_file):
        """Test text before the first statement becomes the description."""
        path = write_file(
            "basic.rec",
            "Checks greeting\n\n"
            "––– input –––\necho hello\n"
            "––– output –––\nhello\n"
            "––– duration: 3ms (100.00%) –––\n",
        )

        structure = read_test_file(path)

        assert structure.description == "Checks greeting"
        assert [s.type for s in structure.steps] == ["input", "output"]
        assert structure.steps[0].content == "echo hello"
        assert structure.steps[1].content == "hello"

    def test_output_argument(self, write_file):
        path = write_file("arg.rec", "––– input –––\ncat data\n––– output: json –––\n{}\n")

        structure = read_test_file(path)

        assert structure.steps[1].args == ["json"]

    def test_block_steps_nested(self, write_file):
        """Test block steps carry the steps of the block file."""
        write_file("login.recb", "––– input –––\nwhoami\n––– output –––\nroot\n")
        path = write_file("root.rec", "––– block: login –––\n––– input –––\npwd\n")

        structure = read_test_file(path)

        block = structure.steps[0]
        assert block.type == "block"
        assert block.args == ["login"]
        assert [s.content for s in block.steps] == ["whoami", "root"]
        assert structure.steps[1].content == "pwd"

    def test_cycle(self, write_file):
        write_file("a.recb", "––– block: a –––\n")
        path = write_file("root.rec", "––– block: a –––\n")

        with pytest.raises(CircularDependency):
            read_test_file(path)

    def test_missing(self, tmp_path):
        with pytest.raises(InputNotFound):
            read_test_file(tmp_path / "nope.rec")


class TestToRec:
    """Unit tests for to_rec and write_test_file."""

    def test_round_trip(self, write_file):
        """Test reading and writing back keeps the transcript."""
        content = (
            "Description\n\n"
            "––– input –––\necho hi\n"
            "––– output –––\nhi\n"
            "––– comment –––\nnote\n"
            "––– block: shared –––\n"
        )
        write_file("shared.recb", "––– input –––\ntrue\n")
        path = write_file("t.rec", content)

        assert to_rec(read_test_file(path)) == content

    def test_json_round_trip(self, write_file):
        """Test the dict form survives JSON and rebuilds the same structure."""
        path = write_file("t.rec", "––– input –––\nls\n––– output –––\nfile\n")
        structure = read_test_file(path)

        rebuilt = TestStructure.from_dict(json.loads(structure.to_json()))

        assert rebuilt == structure

    def test_unknown_step_type(self):
        structure = TestStructure(steps=[TestStep(type="assert", content="x")])

        with pytest.raises(CompilationError):
            to_rec(structure)

    def test_block_without_path(self):
        structure = TestStructure(steps=[TestStep(type="block")])

        with pytest.raises(CompilationError):
            to_rec(structure)

    def test_write_creates_directories(self, tmp_path):
        """Test write_test_file creates missing parent directories."""
        path = tmp_path / "deep" / "dir" / "new.rec"
        structure = TestStructure(steps=[TestStep(type="input", content="echo x")])

        write_test_file(path, structure)

        assert path.read_text() == "––– input –––\necho x\n"
