"""Tests for the command-line interface."""

import json

import pytest

from annotrain.cli import build_options, build_parser, main, parse_param
from annotrain.serializer import GZIP_MAGIC

TSV = "Anna\tPER\nbor\tO\ni\tO\nLund\tLOC\n\nErik\tPER\nreste\tO\n"


class TestArguments:
    """Tests for argument handling."""

    def test_parse_param(self):
        assert parse_param("tagCol=2") == ("tagCol", "2")
        assert parse_param("outputFormat=") == ("outputFormat", "")

    def test_parse_param_invalid(self):
        with pytest.raises(Exception):
            parse_param("tagCol")

    def test_build_options(self, tmp_path):
        """Test that flags and params become options."""
        args = build_parser().parse_args(
            [
                "train",
                "--input", str(tmp_path / "c.tsv"),
                "--format", "tsv",
                "--param", "tagCol=2",
                "--param", "unknown=1",
                "--output", str(tmp_path / "m.ser"),
            ]
        )
        options = build_options(args)

        assert options.input_format == "tsv"
        assert options.tag_col == 2
        assert options.local_file_path == tmp_path / "c.tsv"

    def test_config_file_with_overrides(self, tmp_path):
        """Test that command-line values win over the config file."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("parameters:\n  inputFormat: xlsx\n  tagCol: 2\n")
        args = build_parser().parse_args(
            [
                "inspect",
                "--config", str(config_path),
                "--format", "tsv",
            ]
        )
        options = build_options(args)

        assert options.input_format == "tsv"
        assert options.tag_col == 2

    def test_input_and_upload_exclusive(self, tmp_path):
        with pytest.raises(SystemExit):
            build_parser().parse_args(
                ["inspect", "--input", "a.tsv", "--upload", "b.tsv"]
            )


class TestCommands:
    """Tests for running the commands."""

    def test_inspect(self, tmp_path, capsys):
        """Test that inspect prints the corpus statistics."""
        source = tmp_path / "corpus.tsv"
        source.write_text(TSV, encoding="utf-8")

        code = main(["inspect", "--input", str(source), "--format", "tsv"])

        assert code == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary == {"documents": 2, "tokens": 6, "labels": ["LOC", "O", "PER"]}

    def test_train(self, tmp_path):
        """Test training from an uploaded file into a gzip artifact."""
        source = tmp_path / "corpus.tsv"
        source.write_text(TSV, encoding="utf-8")
        output = tmp_path / "model.ser.gz"

        code = main(
            ["train", "--upload", str(source), "--format", "tsv", "--output", str(output)]
        )

        assert code == 0
        assert output.read_bytes()[:2] == GZIP_MAGIC

    def test_train_empty_corpus(self, tmp_path, capsys):
        """Test that an empty corpus exits with an error and no artifact."""
        source = tmp_path / "blank.tsv"
        source.write_text("\n\n", encoding="utf-8")
        output = tmp_path / "model.ser.gz"

        code = main(
            ["train", "--input", str(source), "--format", "tsv", "--output", str(output)]
        )

        assert code == 1
        assert "No training data" in capsys.readouterr().err
        assert not output.exists()

    def test_missing_input(self, tmp_path, capsys):
        """Test that a missing input file is reported."""
        code = main(["inspect", "--input", str(tmp_path / "nope.ods")])

        assert code == 1
        assert "nope.ods" in capsys.readouterr().err


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
