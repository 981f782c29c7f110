"""lexassist: a retrieval-augmented legal assistant."""

__version__ = "0.1.0"
