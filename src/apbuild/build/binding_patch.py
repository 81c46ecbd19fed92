"""Serde derive patch for generated bindings.

bindgen has no switch for adding arbitrary derives to every type, so the
generated text is patched: each ``#[derive(...)]`` that directly precedes a
``pub struct`` or ``pub enum`` gets ``Serialize, Deserialize`` appended, and a
``use serde::{Serialize, Deserialize};`` line is prepended.

This is a textual pass. Attributes formatted in a way the pattern does not
recognize are left untouched without error. Running it twice appends the
derives twice.
"""

import logging
import re
from dataclasses import dataclass
from typing import List

from .bindings import BindingFile

logger = logging.getLogger(__name__)

SERDE_IMPORT = "use serde::{Serialize, Deserialize};"
SERDE_DERIVES = ("Serialize", "Deserialize")

DERIVE_PATTERN = re.compile(
    r"#\s*\[\s*derive\s*\((?P<d>[^)]+)\)\s*\]\s*pub\s*(?P<s>struct|enum)"
)


class PatchError(Exception):
    """Raised when the binding file cannot be read or rewritten."""
    pass


@dataclass(frozen=True)
class DeriveAttribute:
    """A derive attribute attached to a struct or enum declaration.

    Attributes:
        start: Offset of the attribute in the source text
        end: Offset just past the declaration keyword
        derives: Derive list exactly as written
        kind: "struct" or "enum"
    """

    start: int
    end: int
    derives: str
    kind: str

    def render(self, extra: tuple = SERDE_DERIVES) -> str:
        return f"#[derive({', '.join((self.derives,) + tuple(extra))})] pub {self.kind}"


def find_derive_attributes(text: str) -> List[DeriveAttribute]:
    """List every derive attribute the patch would rewrite, in text order."""
    return [
        DeriveAttribute(m.start(), m.end(), m.group("d"), m.group("s"))
        for m in DERIVE_PATTERN.finditer(text)
    ]


def add_serde_derives(text: str) -> str:
    """Return text with the serde import prepended and derives extended."""
    pieces: List[str] = [SERDE_IMPORT, "\n"]
    cursor = 0
    for attr in find_derive_attributes(text):
        pieces.append(text[cursor:attr.start])
        pieces.append(attr.render())
        cursor = attr.end
    pieces.append(text[cursor:])
    return "".join(pieces)


class BindingPostProcessor:
    """Rewrites a generated binding file in place to derive serde traits."""

    def add_serialization(self, binding_file: BindingFile) -> int:
        """Patch binding_file and return the number of declarations rewritten.

        Raises:
            PatchError: If the file cannot be read or written
        """
        try:
            contents = binding_file.read_text()
        except (OSError, UnicodeDecodeError) as e:
            raise PatchError(f"Failed to read {binding_file.path}: {e}") from e

        patched = len(find_derive_attributes(contents))
        new_contents = add_serde_derives(contents)

        try:
            binding_file.write_text(new_contents)
        except OSError as e:
            raise PatchError(f"Failed to modify derive macros in {binding_file.path}: {e}") from e

        if patched == 0:
            logger.warning(f"No derive attributes matched in {binding_file.path}")
        else:
            logger.info(f"Added serde derives to {patched} declarations")
        return patched
