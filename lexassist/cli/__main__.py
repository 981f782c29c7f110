"""Allow ``python -m lexassist.cli`` to run the ingestion CLI."""

from lexassist.cli.ingest import main

main()
