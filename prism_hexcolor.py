# -*- coding: utf-8 -*-
"""
Prism: Weaving the mathematics of color representation
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Hex Text Marshalling
====================
``HexColor`` is a ``Color`` that travels as its ``#rrggbb`` string in text
formats: JSON through ``HexColorEncoder`` and YAML through ``register_yaml``.
Decoding anything that is not a hex color raises ``MalformedHexError``.
"""

import json
from typing import Any, Union

from prism_color import Color, MalformedHexError

__all__ = [
    "HexColor",
    "HexColorEncoder",
    "YAML_TAG",
    "register_yaml",
]

YAML_TAG: str = "!hexcolor"


class HexColor(Color):
    """A ``Color`` whose text form is its hex string."""

    __slots__ = ()

    @classmethod
    def scan(cls, value: Union[str, bytes]) -> "HexColor":
        """
        Decodes a stored hex string.

        Args:
            value: ``#rrggbb`` or ``#rgb`` as ``str`` or UTF-8 ``bytes``.

        Raises:
            MalformedHexError: *value* is neither a string nor a valid hex color.
        """
        if isinstance(value, (bytes, bytearray)):
            try:
                value = bytes(value).decode("utf-8")
            except UnicodeDecodeError as exc:
                raise MalformedHexError(value) from exc
        if not isinstance(value, str):
            raise MalformedHexError(value)
        return cls.from_hex(value)

    def value(self) -> str:
        """Encodes the color for storage."""
        return self.hex()

    def __str__(self) -> str:
        return self.hex()


class HexColorEncoder(json.JSONEncoder):
    """``json`` encoder writing every ``Color`` as its hex string."""

    def default(self, o: Any) -> Any:
        if isinstance(o, Color):
            return o.hex()
        return super().default(o)


def register_yaml(dumper: Any = None, loader: Any = None) -> None:
    """
    Teaches PyYAML to dump and load ``HexColor`` as a tagged hex scalar.

    Args:
        dumper: Dumper class to extend (default ``yaml.SafeDumper``).
        loader: Loader class to extend (default ``yaml.SafeLoader``).
    """
    import yaml

    dumper = dumper if dumper is not None else yaml.SafeDumper
    loader = loader if loader is not None else yaml.SafeLoader

    def represent(dumper_: Any, color: HexColor) -> Any:
        return dumper_.represent_scalar(YAML_TAG, color.value())

    def construct(loader_: Any, node: Any) -> HexColor:
        return HexColor.scan(loader_.construct_scalar(node))

    dumper.add_representer(HexColor, represent)
    loader.add_constructor(YAML_TAG, construct)
