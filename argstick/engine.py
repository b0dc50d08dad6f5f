"""
argstick population engine: run the hook pipeline over a target object.

What this module provides
- Binder: binds a configuration class; parse(tokens) builds and populates a fresh
  instance, populate(target, tokens) fills an existing one.
- parse(cls, tokens, **options) / populate(target, tokens, **options): one-off helpers.

Pass structure
1. class hooks, before_parse (may rewrite the token list), then token resolution.
2. class hooks, before_populate_properties.
3. for each property in declaration order:
   • property hooks, before_populate_property (may supply the candidate value),
   • required check, revival, assignment,
   • property hooks, after_populate_property (observe or persist).
4. class hooks, after_populate_properties.

Every stage runs hooks through hooks.ordered(): higher priority first, ties in
declaration order.

Failure model
- any fault aborts the rest of the pass; properties assigned before it keep their value.
- hook exceptions are wrapped in HookFailureError (the original is kept as
  options["exception"] and as __cause__); argstick faults raised by hooks pass through.
- non-shell binders raise; shell binders render the fault with rich and exit(1).

Overridden values
- a before-hook may replace an explicitly supplied value; the engine allows it and
  reports an OverriddenValueWarning naming the property.
"""
import logging
import sys

from .faults import *
from .hooks import *
from .metadata import describe
from .revivers import revive
from .tokens import resolve
from .utils import *

logger = logging.getLogger(__name__)


class Binder:
    """
    Population engine bound to one configuration class.

    Options
    - shell: render faults on stderr and exit instead of raising (default False).
    - fancy: draw faults inside a rich panel (default False).
    - colorful: style fault output (default True).
    """

    def __init__(self, cls, /, *, shell=False, fancy=False, colorful=True):
        for name, value in (("shell", shell), ("fancy", fancy), ("colorful", colorful)):
            if not isinstance(value, bool):
                raise TypeError(f"Binder() {name!r} must be a boolean")
        self._type = cls
        self._metadata = describe(cls)
        self._shell = shell
        self._fancy = fancy
        self._colorful = colorful

    metadata = view("metadata")
    shell = view("shell")
    fancy = view("fancy")
    colorful = view("colorful")

    def parse(self, tokens=Unset, /):
        """
        create an instance of the bound class and populate it.
        """
        return self.populate(self._type(), tokens)

    def populate(self, target, tokens=Unset, /):
        """
        populate `target` from `tokens` (sys.argv[1:] when omitted) and return it.
        """
        if not isinstance(target, self._type):
            raise TypeError(f"populate() target must be an instance of {self._type.__qualname__}")
        tokens = tuple(coalesce(tokens, sys.argv[1:]))
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("populate() tokens must be strings")

        try:
            self._run(target, tokens)
        except PopulationException as fault:
            self.trigger(fault)
        return target

    def trigger(self, fault, /, **options):
        """
        surface a fault with this binder's presentation options merged in.
        """
        trigger(
            fault,
            **options,
            prog=self._type.__name__,
            shell=self._shell,
            fancy=self._fancy,
            colorful=self._colorful,
        )

    def _call(self, hook, stage, context):
        descriptor = context.descriptor
        logger.debug("%s: %r (%s)", stage, hook, "class" if descriptor is None else descriptor.name)
        try:
            getattr(hook, stage)(context)
        except PopulationException:
            raise
        except Exception as exception:
            raise HookFailureError(
                "hook %r failed during %s%s: %s" % (
                    hook,
                    stage.replace("_", " "),
                    "" if descriptor is None else " of %r" % descriptor.name,
                    exception,
                ),
                title="hook failure",
                code=FaultCode.HOOK_FAILURE,
                hint="check the hook configuration (files, permissions, values)",
                argument=None if descriptor is None else descriptor.name,
                hook=hook,
                stage=stage,
                exception=exception,
                docs=getdoc(FaultCode.HOOK_FAILURE),
            ) from exception

    def _run(self, target, tokens):
        metadata = self._metadata

        context = BeforeParseContext(tokens, target)
        for hook in ordered(metadata.hooks, "before_parse"):
            self._call(hook, "before_parse", context)
        tokens = tuple(context.tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("before_parse hooks must leave string tokens")

        values = resolve(metadata.descriptors, tokens)

        context = PopulatePropertiesContext(metadata.descriptors, tokens, target)
        for hook in ordered(metadata.hooks, "before_populate_properties"):
            self._call(hook, "before_populate_properties", context)

        for descriptor in metadata.descriptors:
            self._populate_property(descriptor, values.get(descriptor.name), tokens, target)

        context = PopulatePropertiesContext(metadata.descriptors, tokens, target)
        for hook in ordered(metadata.hooks, "after_populate_properties"):
            self._call(hook, "after_populate_properties", context)

    def _populate_property(self, descriptor, supplied, tokens, target):
        context = BeforePopulatePropertyContext(descriptor, tokens, target, supplied)
        for hook in ordered(descriptor.hooks, "before_populate_property"):
            self._call(hook, "before_populate_property", context)

        value = context.value

        if supplied is not None and value != supplied:
            self.trigger(OverriddenValueWarning(
                "supplied value %r of argument %r was replaced by %r" % (supplied, descriptor.name, value),
                title="overridden value",
                code=FaultCode.OVERRIDDEN_VALUE,
                hint="check the hooks attached to %r" % descriptor.name,
                argument=descriptor.name,
                supplied=supplied,
                value=value,
                docs=getdoc(FaultCode.OVERRIDDEN_VALUE),
            ))

        if value is None:
            if descriptor.required:
                raise MissingRequiredValueError(
                    "missing required argument %r" % descriptor.name,
                    title="missing required argument",
                    code=FaultCode.MISSING_REQUIRED_VALUE,
                    hint=_usage(descriptor),
                    argument=descriptor.name,
                    docs=getdoc(FaultCode.MISSING_REQUIRED_VALUE),
                )
            logger.debug("%s: no value, skipped", descriptor.name)
            return

        try:
            revived = revive(descriptor.type, value)
        except (ValueError, TypeError) as exception:
            raise RevivalFailureError(
                "malformed value %r for argument %r: %s" % (value, descriptor.name, exception),
                title="malformed value",
                code=FaultCode.REVIVAL_FAILURE,
                hint="expected a value of type %s" % getattr(descriptor.type, "__name__", descriptor.type),
                argument=descriptor.name,
                value=value,
                exception=exception,
                docs=getdoc(FaultCode.REVIVAL_FAILURE),
            ) from exception

        setattr(target, descriptor.attribute, revived)
        logger.debug("%s: assigned %r", descriptor.name, revived)

        context = AfterPopulatePropertyContext(descriptor, tokens, target, value, revived)
        for hook in ordered(descriptor.hooks, "after_populate_property"):
            self._call(hook, "after_populate_property", context)


def _usage(descriptor):
    switches = "--" + descriptor.name
    if descriptor.shortcut is not None:
        switches += " (-%s)" % descriptor.shortcut
    if descriptor.position is not None:
        return "pass it as positional value #%d or with %s" % (descriptor.position + 1, switches)
    return "pass it with %s <value>" % switches


def parse(cls, tokens=Unset, /, **options):
    """
    one-off: Binder(cls, **options).parse(tokens).

    Example
        >>> options = parse(Options, ["input.txt", "--count", "3"])
    """
    return Binder(cls, **options).parse(tokens)


def populate(target, tokens=Unset, /, **options):
    """
    one-off: Binder(type(target), **options).populate(target, tokens).
    """
    return Binder(type(target), **options).populate(target, tokens)


__all__ = (
    "Binder",
    "parse",
    "populate",
)
