"""Command-line interface for the training pipeline."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import TrainingOptions
from .errors import AnnotrainError
from .pipeline import TrainingPipeline, write_artifact
from .readers import InputSource, read_corpus


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_param(value: str) -> tuple[str, str]:
    """Parse a NAME=VALUE option."""
    name, sep, param_value = value.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"Expected NAME=VALUE, got {value!r}")
    return name.strip(), param_value


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="annotrain",
        description="Train a CRF tagger from annotated spreadsheets or TSV files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Train from an ODS document, gzip compressed model
  annotrain train --input annotations.ods --output model.ser.gz

  # TSV input with POS tags in the third column, uncompressed model
  annotrain train --input corpus.tsv --format tsv --param tagCol=2 \\
      --param outputFormat=ser --output model.ser

  # Using a config file
  annotrain train --config config.yaml --output model.ser.gz

  # Check what would be extracted without training
  annotrain inspect --input annotations.xlsx --format xlsx
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    train_parser = subparsers.add_parser("train", help="Train and serialize a classifier")
    setup_source_arguments(train_parser)
    train_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        required=True,
        help="Where to write the serialized model",
    )
    train_parser.add_argument(
        "--classifier",
        type=str,
        help="Dotted path of an alternative ClassifierTrainer class",
    )

    inspect_parser = subparsers.add_parser(
        "inspect", help="Extract the corpus and print its statistics"
    )
    setup_source_arguments(inspect_parser)

    return parser


def setup_source_arguments(parser: argparse.ArgumentParser) -> None:
    """Setup arguments shared by all commands."""
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML configuration file",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--input",
        "-i",
        type=Path,
        help="Local annotated document (sets localFilePath)",
    )
    source.add_argument(
        "--upload",
        type=Path,
        help="Document to load into memory as an uploaded payload",
    )
    parser.add_argument(
        "--format",
        "-f",
        choices=["ods", "xlsx", "xls", "tsv"],
        help="Input format (default: ods)",
    )
    parser.add_argument(
        "--param",
        "-p",
        type=parse_param,
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Training option, e.g. tagCol=2 or backgroundSymbol=O (repeatable)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )


def build_options(args: argparse.Namespace) -> TrainingOptions:
    """Build options from the config file and command-line overrides."""
    params = list(args.param)
    if args.format:
        params.append(("inputFormat", args.format))
    if args.input:
        params.append(("localFilePath", str(args.input)))

    classifier = getattr(args, "classifier", None)
    if args.config:
        options = TrainingOptions.from_yaml(args.config, params)
        if classifier:
            options = options.model_copy(update={"classifier": classifier})
        return options
    return TrainingOptions.from_parameters(params, classifier=classifier)


def load_upload(args: argparse.Namespace) -> Optional[InputSource]:
    """Read the --upload document into memory."""
    if not args.upload:
        return None
    try:
        return InputSource(payload=args.upload.read_bytes())
    except OSError as e:
        raise AnnotrainError(f"Cannot read upload {args.upload}: {e}") from e


def handle_train(args: argparse.Namespace) -> int:
    """Handle train command."""
    try:
        options = build_options(args)
        pipeline = TrainingPipeline(options)
        data = pipeline.run(load_upload(args))
        write_artifact(data, args.output)
        print(f"\nWrote {len(data)} byte model to {args.output}")
        return 0
    except (AnnotrainError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logging.exception("Training failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1


def handle_inspect(args: argparse.Namespace) -> int:
    """Handle inspect command."""
    try:
        options = build_options(args)
        corpus = read_corpus(options, load_upload(args))
    except (AnnotrainError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(corpus.summary(), ensure_ascii=False, indent=2))
    return 0


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    if args.command == "inspect":
        return handle_inspect(args)
    return handle_train(args)


if __name__ == "__main__":
    sys.exit(main())
