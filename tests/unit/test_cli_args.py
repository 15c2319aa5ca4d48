"""Unit tests for command line parsing."""

import pytest

from batch_pipeline.cli import attach_values, build_parser, parse_args, split_arguments
from batch_pipeline.config import default_encoding


class TestSplitArguments:
    """Tests for separating options from input files."""

    def test_options_then_files(self):
        options, files = split_arguments(["-g", "app", "-e", "utf-8", "a.txt", "b.txt"])
        assert options == ["-g", "app", "-e", "utf-8"]
        assert files == ["a.txt", "b.txt"]

    def test_dash_arguments_after_first_file_are_files(self):
        options, files = split_arguments(["-g", "app", "a.txt", "-z", "-g"])
        assert options == ["-g", "app"]
        assert files == ["a.txt", "-z", "-g"]

    def test_no_files(self):
        options, files = split_arguments(["-g", "app"])
        assert options == ["-g", "app"]
        assert files == []

    def test_trailing_value_flag(self):
        options, files = split_arguments(["-g"])
        assert options == ["-g"]
        assert files == []


class TestAttachValues:
    """Tests for joining value flags with their values."""

    def test_values_attached(self):
        assert attach_values(["-g", "app", "-a", "Person"]) == ["-g=app", "-a=Person"]

    def test_dash_leading_value_attached(self):
        assert attach_values(["-a", "-LRB-"]) == ["-a=-LRB-"]

    def test_other_options_untouched(self):
        assert attach_values(["-z", "-g"]) == ["-z", "-g"]


class TestParseArgs:
    """Tests for parse_args."""

    def test_minimal(self):
        config = parse_args(["-g", "app", "doc.txt"])
        assert config.pipeline_path == "app"
        assert config.encoding is None
        assert config.annotation_types is None
        assert config.input_files == ("doc.txt",)

    def test_all_options(self):
        config = parse_args(
            ["-g", "app", "-e", "latin-1", "-a", "Person", "-a", "Location", "x.txt", "y.txt"]
        )
        assert config.encoding == "latin-1"
        assert config.annotation_types == ("Person", "Location")
        assert config.input_files == ("x.txt", "y.txt")

    def test_last_pipeline_flag_wins(self):
        config = parse_args(["-g", "first", "-g", "second"])
        assert config.pipeline_path == "second"

    def test_duplicate_annotation_types_have_no_effect(self):
        config = parse_args(["-g", "app", "-a", "Person", "-a", "Person"])
        assert config.annotation_types == ("Person",)

    def test_annotation_type_starting_with_dash(self):
        config = parse_args(["-g", "app", "-a", "-LRB-", "-a", "Person", "f.txt"])
        assert config.annotation_types == ("-LRB-", "Person")
        assert config.input_files == ("f.txt",)

    def test_values_starting_with_dash(self):
        config = parse_args(["-g", "-app", "-e", "-enc", "f.txt"])
        assert config.pipeline_path == "-app"
        assert config.encoding == "-enc"

    def test_value_containing_equals(self):
        config = parse_args(["-g", "app", "-a", "a=b"])
        assert config.annotation_types == ("a=b",)

    def test_zero_input_files_allowed(self):
        config = parse_args(["-g", "app"])
        assert config.input_files == ()

    def test_files_may_start_with_dash_after_first_file(self):
        config = parse_args(["-g", "app", "a.txt", "-b.txt"])
        assert config.input_files == ("a.txt", "-b.txt")

    def test_unrecognised_option(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["-g", "app", "-z", "doc.txt"])
        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "Unrecognised option -z" in err
        assert "usage:" in err

    def test_missing_pipeline(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["-e", "utf-8", "doc.txt"])
        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "No .gapp file specified" in err
        assert "usage:" in err

    def test_missing_flag_value(self):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["-g"])
        assert exc_info.value.code == 1

    def test_help_mentions_default_encoding(self):
        help_text = build_parser().format_help()
        assert default_encoding() in help_text
