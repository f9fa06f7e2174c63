from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from coursetune.config.config_loader import PipelineSettings
from coursetune.config.service import get_pipeline_settings
from coursetune.core.errors import DatasetValidationError, ExtractionError, UnsupportedFileTypeError
from coursetune.core.models import RunState, UploadedFile
from coursetune.infra.logger import setup_logger
from coursetune.llm.prompt_utils import load_system_prompt
from coursetune.processing.chunking import split_extracted_text
from coursetune.processing.extractors import extract_uploaded_file
from fine_tuning.jsonl_io import read_dataset
from fine_tuning.launcher import launch_fine_tuning
from fine_tuning.validation import MIN_BATCH_LINES, validate_dataset_batch

logger = setup_logger("fine_tuning")
setup_logger("coursetune")


def _settings(args: argparse.Namespace) -> PipelineSettings:
    """Load configured settings, applying a --block-size override."""
    settings = get_pipeline_settings()
    block_size = getattr(args, "block_size", None)
    if block_size is not None:
        if block_size <= 0:
            raise ValueError(f"--block-size must be > 0 (got {block_size})")
        settings = replace(settings, block_size=block_size)
    return settings


def _read_guide(args: argparse.Namespace) -> str:
    if args.guide_file:
        p = Path(args.guide_file)
        if not p.exists():
            raise FileNotFoundError(f"Guide file not found: {p}")
        return p.read_text(encoding="utf-8").strip()
    return args.guide


def _print_state(state: RunState) -> None:
    print(f"  ... {state.value}")


def cmd_train(args: argparse.Namespace) -> None:
    """Run the full pipeline and launch a fine-tuning job."""
    from coursetune.core.pipeline import train_content

    settings = _settings(args)
    guide = _read_guide(args)
    files = [UploadedFile.from_path(p) for p in args.files]
    dataset_path = Path(args.save_dataset) if args.save_dataset else None
    system_prompt = load_system_prompt(Path(args.system_prompt)) if args.system_prompt else None

    outcome = asyncio.run(
        train_content(
            files,
            guide,
            args.model,
            settings=settings,
            dataset_path=dataset_path,
            system_prompt=system_prompt,
            on_state_change=_print_state,
        )
    )

    print(f"[OK] Fine-tuning job created: {outcome.job.id} (status: {outcome.job.status})")
    print(f"     Dataset lines: {outcome.dataset_lines}")
    print(f"     Accepted blocks: {outcome.accepted_blocks}")
    if outcome.dropped_blocks:
        print(f"     Dropped blocks: {', '.join(outcome.dropped_blocks)}")
    for skipped in outcome.skipped_files:
        print(f"     Skipped {skipped.name}: {skipped.reason}")
    if dataset_path is not None:
        print(f"     Dataset saved to: {dataset_path}")


def cmd_preview(args: argparse.Namespace) -> None:
    """Extract and chunk files without calling any remote service."""
    settings = _settings(args)
    total = 0
    for index, raw_path in enumerate(args.files):
        uploaded = UploadedFile.from_path(raw_path)
        try:
            extracted = extract_uploaded_file(uploaded, index)
        except (UnsupportedFileTypeError, ExtractionError) as e:
            print(f"[SKIP] {uploaded.original_name}: {e}")
            continue
        blocks = split_extracted_text(extracted, settings.block_size)
        total += len(blocks)
        print(
            f"[OK] {uploaded.original_name}: {len(extracted.text)} chars, "
            f"{len(blocks)} block(s)"
        )
    print(f"     Total blocks: {total} (block size {settings.block_size})")


def cmd_validate(args: argparse.Namespace) -> None:
    """Validate an existing JSONL dataset file."""
    path = Path(args.dataset)
    if not path.exists():
        raise FileNotFoundError(f"Dataset not found: {path}")
    records = validate_dataset_batch(read_dataset(path), args.min_lines)
    print(f"[OK] {path} is valid ({records} records)")


def cmd_launch(args: argparse.Namespace) -> None:
    """Upload an existing dataset file and create a fine-tuning job."""
    from coursetune.llm.training.factory import get_training_backend

    path = Path(args.dataset)
    if not path.exists():
        raise FileNotFoundError(f"Dataset not found: {path}")
    settings = get_pipeline_settings()
    dataset = read_dataset(path)
    validate_dataset_batch(dataset, args.min_lines)

    backend = get_training_backend(
        "openai",
        timeout=settings.training_timeout or None,
        purpose=settings.training_purpose,
    )
    job = launch_fine_tuning(dataset, args.model, backend)
    print(f"[OK] Fine-tuning job created: {job.id} (status: {job.status})")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="fine_tuning",
        description="CourseTune Fine-Tuning CLI",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # train command
    p_train = sub.add_parser(
        "train",
        help="Build a dataset from documents and launch a fine-tuning job",
    )
    guide = p_train.add_mutually_exclusive_group(required=True)
    guide.add_argument("--guide", help="Training guide text")
    guide.add_argument("--guide-file", help="Path to a file holding the training guide")
    p_train.add_argument(
        "--model", required=True,
        help="Model used for synthesis and as the fine-tuning base",
    )
    p_train.add_argument(
        "files", nargs="+",
        help="Documents to train on (.txt, .md, .docx, .pdf, .pptx)",
    )
    p_train.add_argument(
        "--block-size", type=int,
        help="Characters per block (default: from pipeline_config.yaml)",
    )
    p_train.add_argument(
        "--save-dataset",
        help="Also write the assembled dataset to this path",
    )
    p_train.add_argument(
        "--system-prompt",
        help="Path to a file replacing the built-in synthesis instruction",
    )
    p_train.set_defaults(func=cmd_train)

    # preview command
    p_preview = sub.add_parser(
        "preview",
        help="Show extraction and chunking results without calling any service",
    )
    p_preview.add_argument("files", nargs="+", help="Documents to preview")
    p_preview.add_argument(
        "--block-size", type=int,
        help="Characters per block (default: from pipeline_config.yaml)",
    )
    p_preview.set_defaults(func=cmd_preview)

    # validate command
    p_validate = sub.add_parser(
        "validate",
        help="Validate a JSONL chat fine-tuning dataset",
    )
    p_validate.add_argument("dataset", help="Path to the JSONL dataset")
    p_validate.add_argument(
        "--min-lines", type=int, default=MIN_BATCH_LINES,
        help=f"Minimum number of lines (default: {MIN_BATCH_LINES})",
    )
    p_validate.set_defaults(func=cmd_validate)

    # launch command
    p_launch = sub.add_parser(
        "launch",
        help="Upload an existing JSONL dataset and create a fine-tuning job",
    )
    p_launch.add_argument("dataset", help="Path to the JSONL dataset")
    p_launch.add_argument("--model", required=True, help="Base model to fine-tune")
    p_launch.add_argument(
        "--min-lines", type=int, default=MIN_BATCH_LINES,
        help=f"Minimum number of lines (default: {MIN_BATCH_LINES})",
    )
    p_launch.set_defaults(func=cmd_launch)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        args.func(args)
    except DatasetValidationError as e:
        print(f"[INVALID] {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"[ERROR] {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
