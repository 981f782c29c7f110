# =============================================================================
# lexassist/cli/review.py -- CLI Contract Review
# =============================================================================
#
# Batch tools that run without the API server:
#
#   file  -- Extract a contract, ingest it, and ask the model for a list of
#           potential legal risks.  Prints the review, or writes it as JSON
#           with --output.
#   ask   -- Answer a question from the three most similar stored chunks.
#
# Usage examples:
#   python -m lexassist.cli.review file --file contracts/msa.docx --output review.json
#   python -m lexassist.cli.review ask --query "Who owns the IP created under the MSA?"
# =============================================================================

"""Standalone CLI for contract review and corpus questions."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from lexassist.config.settings import Settings
from lexassist.utils.errors import LexAssistError
from lexassist.utils.logging import configure_logging


def _build_review_service(app_settings: Settings):  # noqa: ANN202
    """Construct a :class:`ContractReviewService` from the configured providers."""
    from lexassist.cli.ingest import _build_ingestion_service
    from lexassist.config.loader import generation_params, load_config
    from lexassist.providers.factory import build_llm_provider
    from lexassist.services.contract_review_service import ContractReviewService
    from lexassist.services.ingestion.text_extractor import TextExtractor
    from lexassist.services.prompt_builder import PromptBuilder

    app_config = load_config(settings=app_settings)
    ingestion_service, _ = _build_ingestion_service(app_settings)
    prompt_builder = PromptBuilder(
        embedding_provider=ingestion_service.embedding_provider,
        vector_store=ingestion_service.vector_store,
        top_k=app_settings.review_top_k,
    )
    llm = build_llm_provider(app_settings)
    return ContractReviewService(
        extractor=TextExtractor(),
        ingestion_service=ingestion_service,
        prompt_builder=prompt_builder,
        llm=llm,
        top_k=app_settings.review_top_k,
        generation={
            op: generation_params(app_config, op) for op in ("review", "corpus_question")
        },
    )


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


async def _handle_file(args: argparse.Namespace, service) -> int:  # noqa: ANN001
    """Review one contract file."""
    print(f"Reviewing: {args.file}")
    review = await service.review_file(args.file)

    if args.output:
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(review.model_dump_json(indent=2), encoding="utf-8")
        print(f"  Chunks indexed: {review.chunks_indexed}")
        print(f"  Review written to {output}")
    else:
        print(f"  Chunks indexed: {review.chunks_indexed}")
        print()
        print(review.review)
    return 0


async def _handle_ask(args: argparse.Namespace, service) -> int:  # noqa: ANN001
    """Answer a question from the stored corpus."""
    answer = await service.ask_corpus(args.query)
    print(answer.answer)
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m lexassist.cli.review",
        description="Review contracts and ask questions of the stored corpus.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Review commands")

    file_parser = subparsers.add_parser("file", help="Review a .pdf, .docx or .txt contract")
    file_parser.add_argument("--file", required=True, help="Path to the contract")
    file_parser.add_argument("--output", help="Write the review as JSON to this path")

    ask_parser = subparsers.add_parser("ask", help="Ask a question of the stored corpus")
    ask_parser.add_argument("--query", required=True, help="Question text")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    configure_logging(log_level=app_settings.log_level, app_env=app_settings.app_env)

    try:
        service = _build_review_service(app_settings)
        if args.command == "file":
            exit_code = asyncio.run(_handle_file(args, service))
        elif args.command == "ask":
            exit_code = asyncio.run(_handle_ask(args, service))
        else:
            parser.print_help()
            exit_code = 1
    except LexAssistError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
