"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ──────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/config.yaml  -- static defaults checked into the repo
#   2. .env file           -- local overrides (not committed)
#   3. Environment vars    -- set at deploy time
#
# load_config() reads the YAML first, then deep-merges the values that
# Settings resolved from .env / the environment on top of it.
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path
from typing import Any

import yaml

from lexassist.config.settings import Settings

# Sampling parameters used when config.yaml is absent or silent.
_DEFAULT_GENERATION = {"temperature": 0.3, "max_tokens": 4000}


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.
        settings: Pre-built settings; a fresh ``Settings()`` is read when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "llm": {
            "provider": settings.llm_provider,
            "available_providers": settings.get_available_llm_providers(),
        },
        "retrieval": {
            "top_k": settings.rag_top_k,
            "review_top_k": settings.review_top_k,
            "embedding_concurrency": settings.embedding_concurrency,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def generation_params(config: dict, operation: str) -> dict[str, Any]:
    """Return ``{"temperature", "max_tokens"}`` for *operation*.

    Looks up ``llm.operations.<operation>`` and falls back to the
    ``llm`` level values, then to built-in defaults.
    """
    llm_section = config.get("llm", {}) or {}
    params = dict(_DEFAULT_GENERATION)
    for key in params:
        if key in llm_section:
            params[key] = llm_section[key]
    op_section = (llm_section.get("operations") or {}).get(operation) or {}
    for key in params:
        if key in op_section:
            params[key] = op_section[key]
    return params


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
