"""
Custom tags: ``<Name>`` or ``<Name(arg1, arg2)>`` inside cell text.

Every registered TagDescriptor whose tag appears in the text is applied,
in registration order, and each one computes the content from the cell's
text as it was before any tag ran:

  - with a callback, the content is the callback's return value;
  - without one, it is the text with that tag removed.

The content therefore comes from the last matching descriptor alone.
Attributes, events and kind overrides of every matching descriptor are
collected regardless.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Pattern

from tableref.dto.cell import CellKind, CellRecord
from tableref.dto.grid import GridModel, GridStage
from tableref.dto.tag import TagDescriptor, TagResult
from tableref.interpreters.base import CellInterpreter, Resolver

logger = logging.getLogger(__name__)

# Built-in tag: ``<Main>`` turns a cell into a header.
MAIN_TAG = TagDescriptor(name="Main", kind=CellKind.HEADER)


def _tag_pattern(name: str) -> Pattern[str]:
    name = re.escape(name)
    return re.compile(rf"<{name}\((.*?)\)>|<{name}>", re.IGNORECASE)


def get_arguments(pattern: Pattern[str], text: str) -> List[str]:
    """Arguments of the first ``<Name(...)>`` occurrence; ``[]`` if none."""
    text = re.sub(r",\s+", ",", text)
    for m in pattern.finditer(text):
        inner = m.group(1)
        if inner is None:
            continue
        inner = inner.replace("(", "").replace(")", "")
        return inner.split(",") if inner else []
    return []


class TagInterpreter(CellInterpreter):
    stage = GridStage.TAG_RESOLVED

    def __init__(self, descriptors: Optional[List[TagDescriptor]] = None) -> None:
        self._descriptors: List[TagDescriptor] = []
        self._patterns: Dict[str, Pattern[str]] = {}
        for descriptor in descriptors or []:
            self.register(descriptor)

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    @property
    def descriptors(self) -> List[TagDescriptor]:
        return list(self._descriptors)

    def register(self, descriptor: TagDescriptor) -> None:
        """Add a tag.  Re-registering a name replaces the old descriptor in place."""
        key = descriptor.name.lower()
        for i, existing in enumerate(self._descriptors):
            if existing.name.lower() == key:
                self._descriptors[i] = descriptor
                break
        else:
            self._descriptors.append(descriptor)
        self._patterns[key] = _tag_pattern(descriptor.name)

    def unregister(self, name: str) -> bool:
        key = name.lower()
        for i, existing in enumerate(self._descriptors):
            if existing.name.lower() == key:
                del self._descriptors[i]
                del self._patterns[key]
                return True
        return False

    # ------------------------------------------------------------------
    # Interpretation
    # ------------------------------------------------------------------

    def interpret_custom_function(self, text: str) -> TagResult:
        result = TagResult(content=text)

        for descriptor in self._descriptors:
            pattern = self._patterns[descriptor.name.lower()]
            if not pattern.search(text):
                continue

            logger.debug("Tag <%s> found in %r", descriptor.name, text)
            if descriptor.callback is not None:
                args = get_arguments(pattern, text)
                result.content = str(descriptor.callback(args))
            else:
                result.content = pattern.sub("", text)

            result.attributes.extend(descriptor.attributes)
            result.events.extend(descriptor.events)
            if descriptor.kind is not None:
                result.kind = descriptor.kind

        return result

    def interpret_cell(
        self, cell: CellRecord, grid: GridModel, resolve: Resolver
    ) -> str:
        result = self.interpret_custom_function(cell.text)
        cell.set_attributes(result.attributes)
        cell.add_events(result.events)
        if result.kind is not None:
            cell.kind = result.kind
        return result.content
