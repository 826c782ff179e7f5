"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import KvasirConfig


def load_config(cli_path: str | None = None) -> KvasirConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults."""
    if cli_path and not Path(cli_path).exists():
        raise ValueError(f"Config file not found: {cli_path}")

    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./kvasir.yaml"),
        Path.home() / ".kvasir" / "config.yaml",
    ]

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path, encoding="utf-8") as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                if not isinstance(raw, dict):
                    raise ValueError(f"Invalid config in {path}: expected a mapping at the root")
                raw = _expand_env(raw)
                return KvasirConfig(**raw)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
            except ValidationError as e:
                raise ValueError(f"Invalid config in {path}: {e}") from e

    return KvasirConfig()


_ENV_REF = re.compile(r"\$\{(?P<name>\w+)(?::-(?P<default>[^}]*))?\}")


def _substitute(match: re.Match[str]) -> str:
    value = os.environ.get(match["name"])
    if value:
        return value
    return match["default"] or ""


def _expand_env(node: object) -> object:
    """Replace ``${NAME}`` / ``${NAME:-fallback}`` in every string of a YAML tree.

    Unset names without a fallback expand to the empty string.
    """
    if isinstance(node, dict):
        return {key: _expand_env(value) for key, value in node.items()}
    if isinstance(node, list):
        return [_expand_env(item) for item in node]
    if isinstance(node, str):
        return _ENV_REF.sub(_substitute, node)
    return node


# Default YAML template for `kvasir config init`
DEFAULT_CONFIG_TEMPLATE = """\
# kvasir.yaml

# Source parsing
parsers:
  enabled: []                  # empty = all; e.g. [json, yaml, openapi-v3]
  jobs: 1                      # worker threads for per-file parsing

# Document generation
document:
  split_delimiter: "8<--"      # marks the start of each output file
  output_dir: "."              # must already exist
  allow_overwrite: false
  context_key: "files"         # template variable holding parse results

# Logging
log_level: "warn"              # debug | info | warn | error
log_format: "text"             # text | json
"""
