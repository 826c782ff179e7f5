"""OpenAPI v3 decoder layered over JSON/YAML decoding."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from openapi_pydantic import parse_obj

from kvasir.errors import DecodeError
from kvasir.parsers.base import Contents, has_extension


class OpenAPIParser:
    """Validates a JSON/YAML document against the OpenAPI 3.0/3.1 models.

    The capability check peeks at the contents for the ``openapi`` marker so
    ordinary JSON and YAML files aren't reported as failed API documents.
    """

    name = "openapi-v3"
    extensions = ("json", "yaml", "yml")

    def can_parse(self, path: Path, contents: Contents) -> bool:
        if not has_extension(path, self.extensions):
            return False
        return "openapi" in contents()

    def parse(self, path: Path, contents: Contents) -> Any:
        raw = self._load(path, contents())
        if not isinstance(raw, Mapping) or "openapi" not in raw:
            raise DecodeError(self.name, path, "missing top-level 'openapi' version field")
        version = str(raw["openapi"])
        if not version.startswith("3."):
            raise DecodeError(self.name, path, f"unsupported OpenAPI version {version!r}")

        try:
            api = parse_obj(dict(raw))
        except ValueError as e:
            raise DecodeError(self.name, path, str(e)) from e
        return api.model_dump(mode="json", by_alias=True, exclude_none=True)

    def _load(self, path: Path, text: str) -> Any:
        try:
            if has_extension(path, ("json",)):
                return json.loads(text)
            return yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise DecodeError(self.name, path, str(e)) from e
