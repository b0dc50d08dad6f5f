r"""
argstick resolver: raw tokens → one candidate string per property.

Grammar
- switch:     -name, --name, -n  (optionally with an inline value: --name=value)
  • names start with a letter, so "-5" is a value, not a switch.
  • a bool property given as a bare switch resolves to "true".
  • any other property takes the following token as its value.
- positional: any other token, bound to the property whose position matches the count
  of positional tokens seen so far (0-based).
- "--" ends switch recognition: every remaining token is positional.

Matching
- exact match on name or shortcut first, then a case-insensitive match for properties
  that ignore case (first in declaration order wins).

Faults (raised, position-first messages)
- UnknownSwitchError with close-match suggestions.
- DuplicatedArgumentError when one property receives two candidates.
- MissingSwitchValueError when a value-bearing switch ends the input.
- UnexpectedPositionalError when no property accepts a positional token.
"""
import difflib
import re
from collections import deque

from .faults import *

SWITCH = re.compile(r"--?(?P<input>[^\W\d_][\w-]*)(=(?P<value>.*))?", re.DOTALL)


def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _lookup(descriptors, key):
    for descriptor in descriptors:
        if key == descriptor.name or key == descriptor.shortcut:
            return descriptor
    for descriptor in descriptors:
        if descriptor.matches(key):
            return descriptor
    return None


def _switches(descriptors):
    for descriptor in descriptors:
        yield "--" + descriptor.name
        if descriptor.shortcut is not None:
            yield "-" + descriptor.shortcut


def resolve(descriptors, tokens, /):
    """
    Map tokens to candidate strings keyed by argument name.

    Parameters
    - descriptors: PropertyDescriptors of the target class (declaration order).
    - tokens: iterable of raw strings (already split, e.g. sys.argv[1:]).

    Returns
    - dict[str, str]: at most one candidate per property; absent properties are omitted.
    """
    descriptors = tuple(descriptors)
    tokens = deque(tokens)
    values = {}
    index = 0
    positional = 0
    terminated = False

    while tokens:
        token = tokens.popleft()
        index += 1

        if token == "--" and not terminated:
            terminated = True
            continue

        if not terminated and (match := SWITCH.fullmatch(token)):
            input = match["input"]
            if (descriptor := _lookup(descriptors, input)) is None:
                suggestions = difflib.get_close_matches(token.split("=", 1)[0], list(_switches(descriptors)), 5)
                try:
                    hint = "did you mean %r?" % suggestions[0]
                except IndexError:
                    hint = "check the spelling of the option"
                raise UnknownSwitchError(
                    "unknown option %r at %s position" % (token, _ordinal(index)),
                    title="unknown option",
                    code=FaultCode.UNKNOWN_SWITCH,
                    hint=hint,
                    argument=None,
                    input=input,
                    index=index,
                    suggestions=suggestions,
                    docs=getdoc(FaultCode.UNKNOWN_SWITCH),
                )

            value = match["value"]
            if value is None:
                if descriptor.type is bool:
                    value = "true"
                elif not tokens or (not tokens[0] == "--" and SWITCH.fullmatch(tokens[0])):
                    raise MissingSwitchValueError(
                        "option %r at %s position expects a value" % (token, _ordinal(index)),
                        title="missing option value",
                        code=FaultCode.MISSING_SWITCH_VALUE,
                        hint="pass it after a space or inline (for example: %s=<value>)" % token,
                        argument=descriptor.name,
                        input=input,
                        index=index,
                        docs=getdoc(FaultCode.MISSING_SWITCH_VALUE),
                    )
                else:
                    value = tokens.popleft()
                    index += 1
        else:
            descriptor = next((d for d in descriptors if d.position == positional), None)
            if descriptor is None:
                raise UnexpectedPositionalError(
                    "unexpected positional value %r at %s position" % (token, _ordinal(index)),
                    title="unexpected positional value",
                    code=FaultCode.UNEXPECTED_POSITIONAL,
                    hint="remove it or pass it through a named option",
                    argument=None,
                    input=token,
                    index=index,
                    docs=getdoc(FaultCode.UNEXPECTED_POSITIONAL),
                )
            positional += 1
            value = token

        if descriptor.name in values:
            raise DuplicatedArgumentError(
                "argument %r received a second value at %s position" % (descriptor.name, _ordinal(index)),
                title="duplicated argument",
                code=FaultCode.DUPLICATED_ARGUMENT,
                hint="pass %r only once" % descriptor.name,
                argument=descriptor.name,
                index=index,
                docs=getdoc(FaultCode.DUPLICATED_ARGUMENT),
            )
        values[descriptor.name] = value

    return values


__all__ = (
    "SWITCH",
    "resolve",
)
