"""
argstick faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  (errors and warnings). Codes are grouped by domain to keep copy consistent
  and make logs/searches predictable.
- PopulationException / PopulationWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Options carried by every fault
- argument: canonical name of the offending property (None for pass-level faults).
- title, code, hint: header and guidance used by the renderer.
- shell, fancy, colorful, prog: runtime presentation, merged in by trigger().

Integration
- The engine, the resolver and hooks build faults and call trigger(fault, **ctx).
- In non-shell mode, exceptions are raised; in shell mode, they are rendered via rich
  on stderr and the process exits with status 1.
"""
import copy
import inspect
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across argstick (stable identifiers).

    grouping (by high-level domain)
    - resolution (211xx)
      • UNKNOWN_SWITCH, DUPLICATED_ARGUMENT, MISSING_SWITCH_VALUE, UNEXPECTED_POSITIONAL
    - population (212xx)
      • MISSING_REQUIRED_VALUE, REVIVAL_FAILURE
    - hooks (213xx)
      • HOOK_FAILURE
    - sticky store (214xx)
      • DUPLICATE_STICKY_KEY
    - warnings (22xxx)
      • OVERRIDDEN_VALUE
    """
    # --- resolution errors (211xx) ---
    UNKNOWN_SWITCH          = 21101
    DUPLICATED_ARGUMENT     = 21102
    MISSING_SWITCH_VALUE    = 21103
    UNEXPECTED_POSITIONAL   = 21104

    # --- population errors (212xx) ---
    MISSING_REQUIRED_VALUE  = 21201
    REVIVAL_FAILURE         = 21202

    # --- hook errors (213xx) ---
    HOOK_FAILURE            = 21301

    # --- sticky store errors (214xx) ---
    DUPLICATE_STICKY_KEY    = 21401

    # --- warnings (22xxx) ---
    OVERRIDDEN_VALUE        = 22201

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, styles):
    """
    build the rich renderable shared by exceptions and warnings.

    the host can restyle any part through a __styles__ mapping in __main__.
    """
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", True)
    fancy = options.get("fancy", False)

    styles = defaultdict(str, styles | getattr(main, "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    code = options.get("code")
    prog = text(getattr(main, "__prog__", options.get("prog", "argstick")), "prog-name")

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else code, "code"),
        " | ",
        text(str(options.get("title", type(fault).__name__)).title(), "title"),
        " ]"
    )
    message = text(fault.message, "message")
    hint = Text.assemble(text(" → ", "hint-arrow"), text(options.get("hint"), "hint"))

    if fancy:
        width = console.width - 4
        try:
            width = int(width * options["ratio"])
        except KeyError:
            width = None
        return Panel(Group(message, hint), title=header, title_align="left", width=width)

    return Group(header, message, hint)


class PopulationException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            raise self from self.options.get("exception")
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownSwitchError(PopulationException): ...
class DuplicatedArgumentError(PopulationException): ...
class MissingSwitchValueError(PopulationException): ...
class UnexpectedPositionalError(PopulationException): ...
class MissingRequiredValueError(PopulationException): ...
class RevivalFailureError(PopulationException): ...
class HookFailureError(PopulationException): ...
class DuplicateStickyKeyError(PopulationException): ...


class PopulationWarning(Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",  # softer pinky title for warnings
            "message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class OverriddenValueWarning(PopulationWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are raised
      and warnings go through the warnings module.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be an fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "PopulationException",
    "UnknownSwitchError",
    "DuplicatedArgumentError",
    "MissingSwitchValueError",
    "UnexpectedPositionalError",
    "MissingRequiredValueError",
    "RevivalFailureError",
    "HookFailureError",
    "DuplicateStickyKeyError",
    "PopulationWarning",
    "OverriddenValueWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
