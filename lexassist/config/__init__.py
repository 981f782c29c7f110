"""Configuration module -- exports Settings and the YAML loader helpers."""

from lexassist.config.loader import generation_params, load_config
from lexassist.config.settings import Settings

__all__ = ["Settings", "generation_params", "load_config"]
