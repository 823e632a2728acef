r"""
Primitive command-line tokenizer.

tokenize() turns the argv tail of a task into option values, given the task's
option schema. It knows nothing about tasks, defaults or required options;
those belong to taskctr.parser. Its only failure mode is TokenizerError, which
carries a stable string code so callers can map it onto their own error types.

Accepted forms
- --name                 boolean option
- --name value           string option, spaced
- --name=value           string option, inline (value may be empty or start with '-')
- -n / -n value / -nvalue  short alias of a string option
- -abc                   grouped short booleans; a string option inside the group
                         takes the rest of the group (or the next token) as value
- --                     end of options; everything after is positional

Rules
- booleans never take a value; "--loud=yes" is an error.
- a spaced string value cannot look like an option ("--input --output" is
  ambiguous); use the inline form for values starting with '-'.
- repeated options: the last occurrence wins.
- strict mode rejects unknown options; positionals are rejected unless allowed.

Messages lead with the ordinal position of the offending token and refer to
"this task" so the caller can substitute the real task name.
"""
import difflib
import functools
import re
from collections import deque
from typing import NamedTuple

# stable error codes
INVALID_OPTION_VALUE = "INVALID_OPTION_VALUE"
UNKNOWN_OPTION = "UNKNOWN_OPTION"
UNEXPECTED_POSITIONAL = "UNEXPECTED_POSITIONAL"


class TokenizerError(Exception):
    """
    Raised for any token the schema cannot accept.

    Attributes
    - code: one of INVALID_OPTION_VALUE, UNKNOWN_OPTION, UNEXPECTED_POSITIONAL.
    - token: the offending raw token.
    - index: its 1-based position in the tokenized args.
    - suggestions: close option spellings (unknown options only).
    """

    def __init__(self, message, /, code, *, token=None, index=None, suggestions=()):
        super().__init__(message)
        self.message = message
        self.code = code
        self.token = token
        self.index = index
        self.suggestions = tuple(suggestions)


class Tokenized(NamedTuple):
    values: dict
    positionals: tuple = ()


@functools.cache
def _ordinal(number):
    """
    Human-friendly ordinal for a 1-based position ("first"…"tenth", then "11th", "22nd"…).
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


class _Tokenizer:
    """
    One-shot tokenizer state: the schema lookups, the token deque and the running index.
    """

    def __init__(self, options, args, strict, positionals):
        self.options = options
        self.shorts = {spec.short: name for name, spec in options.items() if spec.short}
        self.tokens = deque(args)
        self.strict = strict
        self.allow_positionals = positionals
        self.values = {}
        self.positionals = []
        self.index = 0

    def fail(self, message, code, token, **extra):
        raise TokenizerError(
            "%s at %s position" % (message, _ordinal(self.index)),
            code,
            token=token,
            index=self.index,
            **extra
        )

    def unknown(self, token, display):
        suggestions = difflib.get_close_matches(
            display,
            ["--" + name for name in self.options] + ["-" + short for short in self.shorts],
            3
        )
        self.fail("unknown option %r for this task" % display, UNKNOWN_OPTION, token, suggestions=suggestions)

    def positional(self, token):
        if not self.allow_positionals:
            self.fail("unexpected argument %r, this task does not take positional arguments" % token,
                      UNEXPECTED_POSITIONAL, token)
        self.positionals.append(token)

    def take(self, token, display):
        """
        consume the next token as the value of a spaced string option.
        """
        if not self.tokens:
            self.fail("option '%s <value>' argument missing" % display, INVALID_OPTION_VALUE, token)
        if self.tokens[0].startswith("-") and self.tokens[0] != "-" and self.strict:
            self.fail("option '%s <value>' argument is ambiguous, use '%s=%s' for values starting with '-'" % (
                display, display, self.tokens[0]
            ), INVALID_OPTION_VALUE, token)
        self.index += 1
        return self.tokens.popleft()

    def long(self, token):
        match = re.fullmatch(r"--(?P<name>[^=]+)(=(?P<value>.*))?", token, re.DOTALL)
        if not match:
            self.fail("bad form of option %r" % token, INVALID_OPTION_VALUE, token)

        name, value = match["name"], match["value"]
        display = "--" + name

        if (spec := self.options.get(name)) is None:
            if self.strict:
                self.unknown(token, display)
            self.values[name] = value if value is not None else True
            return

        if spec.boolean:
            if value is not None:
                self.fail("option %r does not take an argument" % display, INVALID_OPTION_VALUE, token)
            self.values[name] = True
        else:
            self.values[name] = value if value is not None else self.take(token, display)

    def short(self, token):
        letters = token[1:]
        for offset, letter in enumerate(letters):
            display = "-" + letter
            if (name := self.shorts.get(letter)) is None:
                if self.strict:
                    self.unknown(token, display)
                self.values[letter] = True
                continue

            if self.options[name].boolean:
                self.values[name] = True
                continue

            # a string option swallows the rest of the group, or the next token
            rest = letters[offset + 1:]
            self.values[name] = rest if rest else self.take(token, display)
            return

    def run(self):
        while self.tokens:
            token = self.tokens.popleft()
            self.index += 1

            if token == "--":
                while self.tokens:
                    self.index += 1
                    self.positional(self.tokens.popleft())
                break
            if token.startswith("--"):
                self.long(token)
            elif token.startswith("-") and token != "-":
                self.short(token)
            else:
                self.positional(token)

        return Tokenized(self.values, tuple(self.positionals))


def tokenize(options, args, /, *, strict=True, positionals=False):
    """
    Parse args into option values according to an option schema.

    Parameters
    - options: Mapping[str, OptionSpec] (long name → spec), e.g. Task.options.
    - args: Sequence[str], the argv tail after the task name.
    - strict: reject unknown options and ambiguous values (default True).
    - positionals: accept positional arguments instead of rejecting them.

    Returns
    - Tokenized(values, positionals); values maps long names to str | bool and
      only contains options that were actually given.

    Raises
    - TokenizerError with a stable code.
    """
    return _Tokenizer(options, args, strict, positionals).run()


__all__ = (
    "INVALID_OPTION_VALUE",
    "UNKNOWN_OPTION",
    "UNEXPECTED_POSITIONAL",
    "TokenizerError",
    "Tokenized",
    "tokenize",
)
