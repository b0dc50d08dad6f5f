"""
argstick sticky arguments: remember the last value of a property across runs.

Behavior
- StickyArg(file) loads the whole store on construction; a missing file is an empty store.
- before_populate_property (Priority.HIGH): when no candidate was supplied, offer the
  remembered string for the property's argument name.
- after_populate_property: when a candidate was used (supplied or recalled) and revived,
  record it and flush the entire store back to the file.

File layout (UTF-8)
    # comments and lines without '=' are ignored
    color=blue
    output=
- the first '=' splits key and value; both are trimmed; no escaping.
- keys are argument names (never shortcuts); values are opaque single-line strings.
- a key appearing twice is an error (DuplicateStickyKeyError).

Concurrency
- the file is read once and rewritten after each change; separate processes sharing a
  file race with last-writer-wins semantics.
"""
import logging
import os

from .faults import *
from .hooks import Hook, Priority
from .utils import view

logger = logging.getLogger(__name__)


class StickyArg(Hook):
    before_populate_property_priority = Priority.HIGH

    def __init__(self, file, /, **priorities):
        super().__init__(**priorities)
        if not isinstance(file, str | os.PathLike):
            raise TypeError("StickyArg() file must be a path")
        self._file = os.fspath(file)
        self._entries = {}
        self.load()

    file = view("file")
    entries = view("entries")

    def get(self, name, /):
        """
        remembered value for an argument name, or None.
        """
        return self._entries.get(name)

    def set(self, name, value, /):
        """
        remember a value (insert or overwrite) and flush the store.

        one entry per line: keys and values holding line breaks are rejected.
        """
        for field, text in (("key", name), ("value", value)):
            if "\n" in text or "\r" in text:
                raise ValueError("sticky %s %r cannot contain line breaks" % (field, text))
        self._entries[name] = value
        self.save()

    def load(self):
        self._entries.clear()

        try:
            with open(self._file, encoding="utf-8-sig") as stream:
                lines = stream.read().splitlines()
        except FileNotFoundError:
            logger.debug("sticky store %s does not exist yet", self._file)
            return

        for number, line in enumerate(lines, 1):
            separator = line.find("=")
            if separator < 0 or line.strip().startswith("#"):
                continue

            key = line[:separator].strip()
            value = line[separator + 1:].strip()

            if key in self._entries:
                raise DuplicateStickyKeyError(
                    "sticky key %r is defined twice in %r (line %d)" % (key, self._file, number),
                    title="duplicate sticky key",
                    code=FaultCode.DUPLICATE_STICKY_KEY,
                    hint="remove one of the %r lines from the file" % key,
                    argument=key,
                    file=self._file,
                    line=number,
                    docs=getdoc(FaultCode.DUPLICATE_STICKY_KEY),
                )
            self._entries[key] = value

        logger.debug("loaded %d sticky value(s) from %s", len(self._entries), self._file)

    def save(self):
        with open(self._file, "w", encoding="utf-8") as stream:
            stream.writelines("%s=%s\n" % (key, value) for key, value in self._entries.items())
        logger.debug("saved %d sticky value(s) to %s", len(self._entries), self._file)

    def before_populate_property(self, context):
        if context.value is None:
            context.value = self.get(context.descriptor.name)

    def after_populate_property(self, context):
        if context.value is not None:
            self.set(context.descriptor.name, context.value)

    def __repr__(self):
        return f"{type(self).__name__}({self._file!r})"


__all__ = (
    "StickyArg",
)
