# =============================================================================
# lexassist/cli/ingest.py -- CLI Ingest Command (document corpus management)
# =============================================================================
#
# Standalone CLI for loading legal documents into the lexassist vector store
# and inspecting it.  The API server answers questions from whatever this
# tool (or POST /api/v1/documents) has stored.
#
# Supported subcommands:
#
#   text   -- Ingest text passed on the command line
#   file   -- Ingest a .pdf, .docx or .txt file
#   stats  -- Show corpus statistics
#
# Each document goes through: extract -> chunk -> embed -> store.  Every
# chunk is tagged with a category ("IP Law" unless --category says
# otherwise) and the source file name.
#
# Usage examples:
#   python -m lexassist.cli.ingest text --text "1. Scope This agreement ..."
#   python -m lexassist.cli.ingest file --file contracts/nda.pdf --category "NDA"
#   python -m lexassist.cli.ingest stats
# =============================================================================

"""Standalone CLI for building the lexassist document corpus."""

from __future__ import annotations

import argparse
import asyncio
import sys

from lexassist.config.settings import Settings
from lexassist.utils.errors import LexAssistError
from lexassist.utils.logging import configure_logging


def _build_ingestion_service(app_settings: Settings):  # noqa: ANN202
    """Construct the ingestion service with the configured providers.

    Also used by ``lexassist.cli.review``, which ingests each contract it
    reviews.  Imports are deferred so ``--help`` stays fast.
    """
    from lexassist.providers.factory import build_embedding_provider, build_vector_store
    from lexassist.services.ingestion.chunker import TextChunker
    from lexassist.services.ingestion.ingestion_service import IngestionService

    embedding_provider = build_embedding_provider(app_settings)
    vector_store = build_vector_store(app_settings, embedding_provider)
    service = IngestionService(
        chunker=TextChunker(),
        embedding_provider=embedding_provider,
        vector_store=vector_store,
        concurrency=app_settings.embedding_concurrency,
        default_metadata={"category": app_settings.default_document_category},
    )
    status = (
        f"Embedding: {embedding_provider.get_provider_name()} | "
        f"Store: {vector_store.get_provider_name()}"
    )
    return service, status


def _metadata(args: argparse.Namespace) -> dict[str, str]:
    return {"category": args.category} if args.category else {}


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


async def _handle_text(args: argparse.Namespace, service) -> int:  # noqa: ANN001
    """Ingest text given on the command line."""
    result = await service.ingest_text(args.text, _metadata(args))
    _print_result(result)
    return 0


async def _handle_file(args: argparse.Namespace, service) -> int:  # noqa: ANN001
    """Ingest a .pdf, .docx or .txt file."""
    print(f"Ingesting file: {args.file}")
    result = await service.ingest_file(args.file, _metadata(args))
    _print_result(result)
    return 0


async def _handle_stats(service) -> int:  # noqa: ANN001
    """Display corpus statistics."""
    stats = await service.get_corpus_stats()

    print("Corpus Statistics")
    print("=" * 40)
    print(f"  Total chunks:     {stats.total_chunks}")
    print(f"  Vector store:     {stats.provider}")
    print(f"  Collection:       {stats.collection}")
    return 0


def _print_result(result) -> None:  # noqa: ANN001
    print("\nIngestion complete:")
    print(f"  Source:         {result.source or '(inline text)'}")
    print(f"  Chunks created: {result.chunks_created}")
    print(f"  Time:           {result.ingestion_time:.2f}s")


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ingestion CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m lexassist.cli.ingest",
        description="Manage the lexassist document corpus.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Ingestion commands")

    # -- text --
    text_parser = subparsers.add_parser("text", help="Ingest text given on the command line")
    text_parser.add_argument("--text", required=True, help="Document text")
    text_parser.add_argument("--category", help="Category label (default: from settings)")

    # -- file --
    file_parser = subparsers.add_parser("file", help="Ingest a .pdf, .docx or .txt file")
    file_parser.add_argument("--file", required=True, help="Path to the document")
    file_parser.add_argument("--category", help="Category label (default: from settings)")

    # -- stats --
    subparsers.add_parser("stats", help="Show corpus statistics")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """Parse the subcommand and dispatch to its handler."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    configure_logging(log_level=app_settings.log_level, app_env=app_settings.app_env)

    try:
        service, status_msg = _build_ingestion_service(app_settings)
        print(f"Providers: {status_msg}")
        print()

        if args.command == "text":
            exit_code = asyncio.run(_handle_text(args, service))
        elif args.command == "file":
            exit_code = asyncio.run(_handle_file(args, service))
        elif args.command == "stats":
            exit_code = asyncio.run(_handle_stats(service))
        else:
            parser.print_help()
            exit_code = 1
    except LexAssistError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
