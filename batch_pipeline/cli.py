import argparse
import logging
import os
import sys
from typing import List, NoReturn, Optional, Sequence, Tuple

from batch_pipeline import engine
from batch_pipeline.config import BatchConfig, default_encoding
from batch_pipeline.runner import BatchRunner

USAGE = (
    "batch-pipeline -g <pipeline> [-e encoding]\n"
    "            [-a annotType] [-a annotType] file1 file2 ... fileN"
)

# flags that take a value, so the value is skipped when looking for the first file
VALUE_FLAGS = ("-g", "-e", "-a")


class UsageErrorParser(argparse.ArgumentParser):
    """ArgumentParser that reports errors with the full help and exits with 1."""

    def error(self, message: str) -> NoReturn:
        sys.stderr.write(f"{message}\n")
        self.print_help(sys.stderr)
        sys.exit(1)


def build_parser() -> UsageErrorParser:
    parser = UsageErrorParser(
        prog="batch-pipeline",
        usage=USAGE,
        description="Run a saved spaCy pipeline over files, writing <file>.out.xml for each.",
        add_help=False,
    )
    parser.add_argument(
        "-g",
        dest="pipeline_path",
        metavar="pipeline",
        help=(
            "(required) path to the saved pipeline to run over the given "
            "documents: a directory written by nlp.to_disk() or a spaCy .cfg file."
        ),
    )
    parser.add_argument(
        "-e",
        dest="encoding",
        metavar="encoding",
        help=(
            "(optional) character encoding of the source documents, also used "
            "for the output files. If not specified, the platform default "
            f'encoding (currently "{default_encoding()}") is assumed.'
        ),
    )
    parser.add_argument(
        "-a",
        dest="annotation_types",
        metavar="type",
        action="append",
        help=(
            "(optional) write out just the annotations of this type from the "
            "default annotation set, as inline XML tags. May be repeated; "
            "annotations of all the given types are written. Without -a the "
            "whole document is written with every annotation set."
        ),
    )
    return parser


def split_arguments(argv: Sequence[str]) -> Tuple[List[str], List[str]]:
    """
    Split the command line into leading options and input files.

    Options end at the first argument that does not start with '-' (other
    than a flag's value). Everything from there on is an input file.
    """
    i = 0
    while i < len(argv) and argv[i].startswith("-"):
        i += 2 if argv[i] in VALUE_FLAGS else 1
    i = min(i, len(argv))
    return list(argv[:i]), list(argv[i:])


def attach_values(options: Sequence[str]) -> List[str]:
    """
    Join each value flag with its value as ``-a=value``.

    The value is taken as is, even when it starts with '-' (``-a -LRB-``),
    which argparse would otherwise read as another option.
    """
    joined = []
    i = 0
    while i < len(options):
        if options[i] in VALUE_FLAGS and i + 1 < len(options):
            joined.append(f"{options[i]}={options[i + 1]}")
            i += 2
        else:
            joined.append(options[i])
            i += 1
    return joined


def parse_args(argv: Sequence[str]) -> BatchConfig:
    parser = build_parser()
    options, files = split_arguments(argv)
    args, unknown = parser.parse_known_args(attach_values(options))
    if unknown:
        parser.error(f"Unrecognised option {unknown[0]}")
    if args.pipeline_path is None:
        parser.error("No .gapp file specified")
    return BatchConfig.from_args(
        pipeline_path=args.pipeline_path,
        encoding=args.encoding,
        annotation_types=args.annotation_types,
        input_files=files,
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    logging.basicConfig(level=os.environ.get("BATCH_PIPELINE_LOG", "WARNING").upper())
    config = parse_args(sys.argv[1:] if argv is None else argv)

    engine.init()

    runner = BatchRunner(config)
    runner.run()


if __name__ == "__main__":
    main()
