"""Command-line tools for lexassist.

- ``python -m lexassist.cli.ingest`` -- load documents into the vector store
  and show corpus statistics.
- ``python -m lexassist.cli.review`` -- review a contract file, or ask a
  question of the stored corpus.

Each tool builds its own providers from ``Settings``; heavy imports are
deferred inside functions so ``--help`` returns immediately.
"""
