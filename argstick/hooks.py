r"""
argstick hooks: the five-stage lifecycle and its contexts.

Overview
- Hook
  • Base class for every unit of behavior plugged into a population pass.
  • Five callbacks, one per stage, each paired with an independent integer priority:
      before_parse                 / before_parse_priority
      before_populate_properties   / before_populate_properties_priority
      before_populate_property     / before_populate_property_priority
      after_populate_property      / after_populate_property_priority
      after_populate_properties    / after_populate_properties_priority
  • Callbacks are no-ops by default; subclasses override the ones they need.
  • Priorities default to the class attributes and can be overridden per instance
    through constructor keywords (e.g. Hook(before_populate_property_priority=5)).

- Priority contract
  • Higher priority runs first; equal priorities keep declaration order.
  • ordered(hooks, stage) is the single implementation of that contract; the engine
    never knows about concrete hook kinds.
  • Priority.HIGH (10) is used by StickyArg, Priority.NORMAL (0) by DefaultValue, so a
    remembered value wins over a static default when both decorate one property.

- Contexts (one class per stage, sharing HookContext)
  • HookContext: descriptor (None at class scope), tokens, target.
  • BeforeParseContext: tokens is a mutable list that hooks may rewrite.
  • PopulatePropertiesContext: class scope, exposes every descriptor of the pass.
  • BeforePopulatePropertyContext: mutable candidate `value`, read-only `supplied`.
  • AfterPopulatePropertyContext: final `value` and the `revived` object that was assigned.

Example
    >>> class Upper(Hook):
    ...     def before_populate_property(self, context):
    ...         if context.value is not None:
    ...             context.value = context.value.upper()
"""
from enum import Enum, IntEnum

from .utils import view


class Priority(IntEnum):
    """
    well-known priority levels (any int is accepted; these are anchors).
    """
    LOW     = -10
    NORMAL  = 0
    HIGH    = 10


STAGES = (
    "before_parse",
    "before_populate_properties",
    "before_populate_property",
    "after_populate_property",
    "after_populate_properties",
)


class HookContext:
    """
    State shared by every stage: what is populated, from which tokens, and for which property.
    """
    __slots__ = ("_descriptor", "_tokens", "_target")

    def __init__(self, descriptor, tokens, target):
        self._descriptor = descriptor
        self._tokens = tokens
        self._target = target

    descriptor = property(lambda self: self._descriptor)
    tokens = view("tokens")
    target = property(lambda self: self._target)


class BeforeParseContext(HookContext):
    __slots__ = ()

    def __init__(self, tokens, target):
        super().__init__(None, list(tokens), target)

    # the only stage where the raw token list is writable
    tokens = property(lambda self: self._tokens)


class PopulatePropertiesContext(HookContext):
    __slots__ = ("_descriptors",)

    def __init__(self, descriptors, tokens, target):
        super().__init__(None, tokens, target)
        self._descriptors = descriptors

    descriptors = view("descriptors")


class BeforePopulatePropertyContext(HookContext):
    """
    Candidate value of one property before revival.

    value is None until the resolver or a hook supplies it; supplied keeps what
    the resolver produced so hooks can tell user input from their own defaults.
    """
    __slots__ = ("value", "_supplied")

    def __init__(self, descriptor, tokens, target, value):
        super().__init__(descriptor, tokens, target)
        self.value = value
        self._supplied = value

    supplied = property(lambda self: self._supplied)


class AfterPopulatePropertyContext(HookContext):
    __slots__ = ("_value", "_revived")

    def __init__(self, descriptor, tokens, target, value, revived):
        super().__init__(descriptor, tokens, target)
        self._value = value
        self._revived = revived

    value = property(lambda self: self._value)
    revived = property(lambda self: self._revived)


class Hook:
    before_parse_priority = Priority.NORMAL
    before_populate_properties_priority = Priority.NORMAL
    before_populate_property_priority = Priority.NORMAL
    after_populate_property_priority = Priority.NORMAL
    after_populate_properties_priority = Priority.NORMAL

    def __init__(self, **priorities):
        for name, priority in priorities.items():
            if not name.endswith("_priority") or name.removesuffix("_priority") not in STAGES:
                raise TypeError(f"{type(self).__name__}() got an unexpected keyword argument {name!r}")
            if not isinstance(priority, int) or isinstance(priority, bool):
                raise TypeError(f"{type(self).__name__} {name!r} must be an integer")
            setattr(self, name, priority)

    def before_parse(self, context):
        pass

    def before_populate_properties(self, context):
        pass

    def before_populate_property(self, context):
        pass

    def after_populate_property(self, context):
        pass

    def after_populate_properties(self, context):
        pass

    def __repr__(self):
        priorities = ", ".join(
            "%s=%d" % (name, priority) for name in STAGES
            if (priority := getattr(self, name + "_priority"))
        )
        return f"{type(self).__name__}({priorities})"


def ordered(hooks, stage, /):
    """
    Return hooks in execution order for a stage.

    Sorting is by descending `<stage>_priority`; Python's sort is stable (also with
    reverse=True), so hooks sharing a priority keep their declaration order.
    """
    if stage not in STAGES:
        raise ValueError(f"unknown hook stage {stage!r}")
    return sorted(hooks, key=lambda hook: getattr(hook, stage + "_priority"), reverse=True)


class DefaultValue(Hook):
    """
    Supply a fixed fallback when no candidate value was given.

    The value is stringified so it flows through revival like user input: booleans
    become "true"/"false" and enum members their name. A None default supplies nothing.
    """
    before_populate_property_priority = Priority.NORMAL

    def __init__(self, value, /, **priorities):
        super().__init__(**priorities)
        self.value = value

    def before_populate_property(self, context):
        if context.value is None and self.value is not None:
            context.value = _stringify(self.value)

    def __repr__(self):
        return f"{type(self).__name__}({self.value!r})"


def _stringify(value):
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return value.name
    return str(value)


__all__ = (
    "Priority",
    "STAGES",
    "HookContext",
    "BeforeParseContext",
    "PopulatePropertiesContext",
    "BeforePopulatePropertyContext",
    "AfterPopulatePropertyContext",
    "Hook",
    "ordered",
    "DefaultValue",
)
