"""Decoders for plain structured-text formats.

Each decoder hands the text to one library and wraps that library's error
type in DecodeError. Capability checks look at the extension only.
"""

from __future__ import annotations

import configparser
import json
import tomllib
from pathlib import Path
from typing import Any
from xml.parsers.expat import ExpatError

import javaproperties
import xmltodict
import yaml
from pyhocon import ConfigFactory
from pyhocon.exceptions import ConfigException
from pyparsing import ParseBaseException

from kvasir.errors import DecodeError
from kvasir.parsers.base import Contents, has_extension


class JsonParser:
    name = "json"
    extensions = ("json", "tfstate")

    def can_parse(self, path: Path, contents: Contents) -> bool:
        return has_extension(path, self.extensions)

    def parse(self, path: Path, contents: Contents) -> Any:
        try:
            return json.loads(contents())
        except json.JSONDecodeError as e:
            raise DecodeError(self.name, path, str(e)) from e


class YamlParser:
    name = "yaml"
    extensions = ("yaml", "yml")

    def can_parse(self, path: Path, contents: Contents) -> bool:
        return has_extension(path, self.extensions)

    def parse(self, path: Path, contents: Contents) -> Any:
        try:
            return yaml.safe_load(contents())
        except yaml.YAMLError as e:
            raise DecodeError(self.name, path, str(e)) from e


class PropertiesParser:
    """Java ``.properties`` files, decoded to a flat string map."""

    name = "java-properties"
    extensions = ("properties",)

    def can_parse(self, path: Path, contents: Contents) -> bool:
        return has_extension(path, self.extensions)

    def parse(self, path: Path, contents: Contents) -> Any:
        try:
            return javaproperties.loads(contents())
        except ValueError as e:
            raise DecodeError(self.name, path, str(e)) from e


class TomlParser:
    name = "toml"
    extensions = ("toml",)

    def can_parse(self, path: Path, contents: Contents) -> bool:
        return has_extension(path, self.extensions)

    def parse(self, path: Path, contents: Contents) -> Any:
        try:
            return tomllib.loads(contents())
        except tomllib.TOMLDecodeError as e:
            raise DecodeError(self.name, path, str(e)) from e


class IniParser:
    """INI files as ``{section: {key: value}}``.

    Keys keep their case and ``%`` interpolation is disabled so values come
    through verbatim. Entries in ``[DEFAULT]`` appear under that name and are
    also visible in every section, as configparser resolves them.
    """

    name = "ini"
    extensions = ("ini",)

    def can_parse(self, path: Path, contents: Contents) -> bool:
        return has_extension(path, self.extensions)

    def parse(self, path: Path, contents: Contents) -> Any:
        parser = configparser.ConfigParser(interpolation=None)
        parser.optionxform = str  # type: ignore[assignment,method-assign]
        try:
            parser.read_string(contents(), source=str(path))
        except configparser.Error as e:
            raise DecodeError(self.name, path, str(e)) from e

        result: dict[str, dict[str, str]] = {}
        if parser.defaults():
            result[parser.default_section] = dict(parser.defaults())
        for section in parser.sections():
            result[section] = dict(parser.items(section, raw=True))
        return result


class XmlParser:
    """XML via xmltodict: attributes become ``@name`` keys, text becomes ``#text``."""

    name = "xml"
    extensions = ("xml",)

    def can_parse(self, path: Path, contents: Contents) -> bool:
        return has_extension(path, self.extensions)

    def parse(self, path: Path, contents: Contents) -> Any:
        try:
            return xmltodict.parse(contents())
        except ExpatError as e:
            raise DecodeError(self.name, path, str(e)) from e


class HoconParser:
    name = "hocon"
    extensions = ("conf",)

    def can_parse(self, path: Path, contents: Contents) -> bool:
        return has_extension(path, self.extensions)

    def parse(self, path: Path, contents: Contents) -> Any:
        try:
            tree = ConfigFactory.parse_string(contents())
        except (ConfigException, ParseBaseException) as e:
            raise DecodeError(self.name, path, str(e)) from e
        return tree.as_plain_ordered_dict()
