r"""
argstick declarations and the metadata table derived from them.

Overview
- Declarations
  • Argument(...): class-attribute declaration of one bindable property (name, shortcut,
    position, description, required, ignore_case, action, type, default, hooks).
    It is a descriptor: on instances it reads as None until a pass assigns a value.
  • __hooks__ / @hook(...): class-scoped hooks, fired once per population pass.
  • __ignorecase__: class-wide default for case-insensitive switch matching.

- Metadata table
  • describe(cls) walks the class (bases first), merges declarations and annotations,
    validates them, and returns a ClassMetadata holding immutable PropertyDescriptors.
  • The table is built once per class and cached; the engine treats it purely as data.

Shortcut rules
- Default: first character of the argument name.
- Explicit string: used as-is. Explicit None: the property has no shortcut.
- The action property never has a shortcut.
- A derived shortcut already taken by an earlier name or shortcut is dropped; explicit
  collisions are rejected with ValueError.

Example
    >>> class Options:
    ...     __ignorecase__ = True
    ...
    ...     source: str = Argument(position=0, required=True, description="input file")
    ...     count: int = Argument(default=1)
    ...     color: str = Argument(hooks=[StickyArg("colors.txt")])
    >>> [d.shortcut for d in describe(Options).descriptors]
    ['s', 'c', None]
"""
import re
import types
import typing
import weakref
from collections.abc import Iterable

from rich.text import Text

from .hooks import Hook, DefaultValue
from .utils import *

_NAME = re.compile(r"[^\W\d_][\w-]*")


def _sanitize_names(metadata, /):
    """
    Internal: validate 'name' and 'shortcut'.

    - name: Unset or a non-empty identifier-like string (letters first; letters, digits,
      '_' and '-' afterwards). Leading dashes are stripped so "--output" means "output".
    - shortcut: Unset (derive later), None (no shortcut) or a string with the same rules.
    """
    for field in ("name", "shortcut"):
        if (value := metadata[field]) is Unset or (field == "shortcut" and value is None):
            continue
        if not isinstance(value, str):
            raise TypeError(f"argument '{field}' must be a string")
        elif not (value := value.strip().lstrip("-")):
            raise ValueError(f"argument '{field}' cannot be empty")
        elif not _NAME.fullmatch(value):
            raise ValueError(f"argument '{field}' must be a valid switch name, got {value!r}")
        metadata[field] = value

    if metadata["action"] and isinstance(metadata["shortcut"], str):
        raise TypeError("the action argument cannot declare a shortcut")


def _sanitize_options(metadata, /):
    """
    Internal: validate position, description, flags, type and hooks.

    Side effects
    - Mutates the metadata dict in place (hooks become a list with the default hook
      appended when a default was declared; default=None declares no default).
    """
    if (position := metadata["position"]) is not None:
        if not isinstance(position, int) or isinstance(position, bool):
            raise TypeError("argument 'position' must be an integer")
        elif position < 0:
            raise ValueError("argument 'position' cannot be negative")

    if not isinstance(descr := metadata["description"], str | Text | None):
        raise TypeError("argument 'description' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError("argument 'description' cannot be empty")
    metadata["description"] = descr

    for field in ("required", "action"):
        if not isinstance(metadata[field], bool):
            raise TypeError(f"argument '{field}' must be a boolean")

    if not isinstance(metadata["ignore_case"], bool | Unset):
        raise TypeError("argument 'ignore_case' must be a boolean")

    if metadata["type"] is not Unset and not callable(metadata["type"]):
        raise TypeError("argument 'type' must be callable")

    if not isinstance(metadata["hooks"], Iterable) or isinstance(metadata["hooks"], str):
        raise TypeError("argument 'hooks' must be an iterable of hooks")
    hooks = list(metadata["hooks"])
    for hook in hooks:
        if not isinstance(hook, Hook):
            raise TypeError(f"argument hooks must be Hook instances, got {type(hook).__name__!r}")
    if metadata["default"] is not Unset and metadata["default"] is not None:
        hooks.append(DefaultValue(metadata["default"]))
    metadata["hooks"] = hooks


class Argument:
    """
    Declare a bindable property on a configuration class.
    """
    __introspectable__ = (
        "name", "shortcut", "position", "description", "required",
        "ignore_case", "action", "type", "default", "hooks",
    )

    def __init__(
            self,
            name=Unset,
            /,
            *,
            shortcut=Unset,
            position=None,
            description=None,
            required=False,
            ignore_case=Unset,
            action=False,
            type=Unset,
            default=Unset,
            hooks=(),
    ):
        metadata = dict(
            name=name,
            shortcut=shortcut,
            position=position,
            description=description,
            required=required,
            ignore_case=ignore_case,
            action=action,
            type=type,
            default=default,
            hooks=hooks,
        )
        _sanitize_names(metadata)
        _sanitize_options(metadata)
        for field, value in metadata.items():
            setattr(self, "_" + field, value)
        self._attribute = Unset

    def __set_name__(self, owner, name):
        if self._attribute is Unset:
            self._attribute = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        # only reached while the instance holds no populated value
        return None

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "argument(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


for _field in Argument.__introspectable__:
    setattr(Argument, _field, view(_field))
del _field


class PropertyDescriptor:
    """
    Immutable metadata view of one bindable property.

    Fields
    - name: canonical argument name (keys the sticky store and the resolver output).
    - attribute: Python attribute the revived value is assigned to.
    - type: target type used for revival.
    - shortcut, position, ignore_case, required, action, description.
    - hooks: property-scoped hooks in declaration order.
    """
    __introspectable__ = (
        "name", "attribute", "type", "shortcut", "position",
        "ignore_case", "required", "action", "description", "hooks",
    )
    __slots__ = tuple("_" + field for field in __introspectable__)

    def __init__(self, *, name, attribute, type, shortcut, position, ignore_case, required, action, description, hooks):
        self._name = name
        self._attribute = attribute
        self._type = type
        self._shortcut = shortcut
        self._position = position
        self._ignore_case = ignore_case
        self._required = required
        self._action = action
        self._description = description
        self._hooks = tuple(hooks)

    def matches(self, key, /):
        """
        whether a switch key (without dashes) designates this property.
        """
        candidates = (self._name,) if self._shortcut is None else (self._name, self._shortcut)
        if self._ignore_case:
            return key.casefold() in map(str.casefold, candidates)
        return key in candidates

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "property-descriptor(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


for _field in PropertyDescriptor.__introspectable__:
    setattr(PropertyDescriptor, _field, view(_field))
del _field


class ClassMetadata:
    __slots__ = ("_type", "_descriptors", "_hooks", "_ignore_case")

    def __init__(self, type, descriptors, hooks, ignore_case):
        # weak, so the per-class cache never keeps its key alive
        self._type = weakref.ref(type)
        self._descriptors = tuple(descriptors)
        self._hooks = tuple(hooks)
        self._ignore_case = ignore_case

    type = property(lambda self: self._type())
    descriptors = view("descriptors")
    hooks = view("hooks")
    ignore_case = view("ignore_case")

    @property
    def action(self):
        """
        the designated action property, or None.
        """
        return next((descriptor for descriptor in self._descriptors if descriptor.action), None)

    def __getitem__(self, name):
        for descriptor in self._descriptors:
            if descriptor.name == name:
                return descriptor
        raise KeyError(name)

    def __repr__(self):
        return f"class-metadata(type={self._type().__qualname__}, descriptors={[d.name for d in self._descriptors]!r})"


def hook(*hooks):
    """
    Class decorator attaching class-scoped hooks (appended after any declared __hooks__).

    Example
        @hook(AuditHook())
        class Options: ...
    """
    for object in hooks:
        if not isinstance(object, Hook):
            raise TypeError(f"@hook() arguments must be Hook instances, got {type(object).__name__!r}")

    @rename("hook")
    def decorator(cls):
        if not isinstance(cls, type):
            raise TypeError("@hook() must decorate a class")
        cls.__hooks__ = (*cls.__dict__.get("__hooks__", ()), *hooks)
        _tables.pop(cls, None)
        return cls

    return decorator


def _unwrap(annotation):
    """
    Optional[X] and X | None revive as X.
    """
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        arguments = [argument for argument in typing.get_args(annotation) if argument is not type(None)]
        if len(arguments) == 1:
            return arguments[0]
    return annotation


_tables = weakref.WeakKeyDictionary()


def describe(cls, /):
    """
    Build (once) the metadata table of a configuration class.

    Tables are cached per class and dropped together with the class.

    Returns
    - ClassMetadata with descriptors in declaration order (base classes first) and the
      class-scoped hooks collected from every __hooks__ in the MRO.

    Raises
    - TypeError: not a class, invalid class hooks, more than one action property.
    - ValueError: duplicate positions, names or explicit shortcuts.
    """
    if not isinstance(cls, type):
        raise TypeError("describe() argument must be a class")
    try:
        return _tables[cls]
    except KeyError:
        table = _tables[cls] = _build(cls)
        return table


def _build(cls):
    declarations = {}
    hooks = []
    for klass in reversed(cls.__mro__):
        for object in klass.__dict__.get("__hooks__", ()):
            if not isinstance(object, Hook):
                raise TypeError(f"{cls.__qualname__}.__hooks__ must contain Hook instances")
            hooks.append(object)
        for attribute, object in vars(klass).items():
            if isinstance(object, Argument):
                declarations[attribute] = object

    ignore_case = getattr(cls, "__ignorecase__", False)
    if not isinstance(ignore_case, bool):
        raise TypeError(f"{cls.__qualname__}.__ignorecase__ must be a boolean")

    annotations = typing.get_type_hints(cls)

    if sum(argument.action for argument in declarations.values()) > 1:
        raise TypeError(f"{cls.__qualname__} declares more than one action argument")

    positions = {}
    names = {}
    for attribute, argument in declarations.items():
        name = coalesce(argument.name, attribute)
        if name in names:
            raise ValueError(f"{cls.__qualname__} declares argument {name!r} twice")
        names[name] = attribute
        if (position := argument.position) is not None:
            if position in positions:
                raise ValueError(f"{cls.__qualname__} arguments {positions[position]!r} and {name!r} share position {position}")
            positions[position] = name

    shortcuts = {}
    for attribute, argument in declarations.items():
        if isinstance(shortcut := argument.shortcut, str):
            if shortcut in shortcuts or (shortcut in names and names[shortcut] != attribute):
                raise ValueError(f"{cls.__qualname__} shortcut {shortcut!r} is declared twice")
            shortcuts[shortcut] = attribute

    descriptors = []
    for attribute, argument in declarations.items():
        name = coalesce(argument.name, attribute)
        shortcut = argument.shortcut
        if argument.action:
            shortcut = None
        elif shortcut is Unset:
            shortcut = name[0]
            if shortcut in shortcuts or (shortcut in names and names[shortcut] != attribute):
                shortcut = None
            else:
                shortcuts[shortcut] = attribute
        descriptors.append(PropertyDescriptor(
            name=name,
            attribute=attribute,
            type=coalesce(argument.type, _unwrap(annotations.get(attribute, str))),
            shortcut=shortcut,
            position=argument.position,
            ignore_case=coalesce(argument.ignore_case, ignore_case),
            required=argument.required,
            action=argument.action,
            description=argument.description,
            hooks=argument.hooks,
        ))

    return ClassMetadata(cls, descriptors, hooks, ignore_case)


__all__ = (
    "Argument",
    "PropertyDescriptor",
    "ClassMetadata",
    "hook",
    "describe",
)
