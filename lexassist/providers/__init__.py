"""Concrete adapters for the interfaces in ``lexassist.interfaces``."""
