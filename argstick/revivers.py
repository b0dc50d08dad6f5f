"""
argstick revivers: string → typed value conversion.

Contract
- revive(type, text) returns the typed value or raises ValueError/TypeError; it never
  touches global state other than reading the registry.
- reviver(type) registers a converter `callable(text) -> value` for a type; the most
  specific registration along the type's MRO wins.

Built-ins
- str: identity.
- bool: true/false, yes/no, on/off, 1/0 (case-insensitive).
- Enum subclasses: member name (case-insensitive), then member value.
- anything else callable: type(text) (int, float, pathlib.Path, decimal.Decimal, ...).
"""
import builtins
import enum

from .utils import rename

_revivers = {}


def reviver(type, /):
    """
    Register a reviver for a type (decorator).

    Example
        @reviver(datetime.date)
        def revive_date(text):
            return datetime.date.fromisoformat(text)
    """
    if not isinstance(type, builtins.type):
        raise TypeError("reviver() argument must be a type")

    @rename("reviver")
    def decorator(callback):
        if not callable(callback):
            raise TypeError("@reviver() must decorate a callable")
        _revivers[type] = callback
        return callback

    return decorator


@reviver(str)
def _revive_str(text):
    return text


@reviver(bool)
def _revive_bool(text):
    match text.strip().lower():
        case "true" | "yes" | "on" | "1":
            return True
        case "false" | "no" | "off" | "0":
            return False
    raise ValueError(f"{text!r} is not a boolean")


def _revive_enum(type, text):
    for member in type:
        if member.name.lower() == text.strip().lower():
            return member
    for member in type:
        if str(member.value) == text:
            return member
    raise ValueError(f"{text!r} is not one of {', '.join(member.name for member in type)}")


def revive(type, text, /):
    """
    Convert a candidate string into `type`.

    Raises
    - ValueError / TypeError from the underlying converter.
    - TypeError when `type` is neither registered nor callable.
    """
    if not isinstance(text, str):
        raise TypeError("revive() text must be a string")
    for klass in getattr(type, "__mro__", ()):
        # enum members are never revived by their mixed-in base (str, int)
        if isinstance(type, enum.EnumType) and not issubclass(klass, enum.Enum):
            break
        if (callback := _revivers.get(klass)) is not None:
            return callback(text)
    if isinstance(type, enum.EnumType):
        return _revive_enum(type, text)
    if not callable(type):
        raise TypeError(f"no reviver for {type!r}")
    return type(text)


__all__ = (
    "reviver",
    "revive",
)
