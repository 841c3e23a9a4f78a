"""
cmdtree faults (user errors and control signals) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing fault.
- CommandException: base type carrying a message plus read-only options that
  knows how to render itself (plain, colorful, or fancy panel) through rich.
- FlagParseError family: option parsing failures; they carry the diagnostic
  and the failing command's synopsis.
- HelpRequested: not a failure, a signal meaning “print this and stop”.
- trigger(): central entry point to surface a fault (raise, or print in shell mode).
- getdoc(): optional description lookup for a code from the host application.

Integration
- The dispatcher raises faults; Dispatcher.invoke() catches them and triggers
  them in shell mode so they are rendered instead of raised.
- Nothing here ever exits the process: exit codes belong to the host.
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - signals (101xx)
      • HELP_REQUESTED
    - routing (111xx)
      • UNKNOWN_SUBCOMMAND
    - switches (1111x/1112x)
      • UNKNOWN_SWITCH, OPTION_VALUE_REQUIRED, INVALID_VALUE
    - usage (1115x)
      • USAGE (raised by run callbacks through Command.usage_error)

    the host may remap codes to friendlier labels through a __codes__ mapping
    in __main__ (see normalize()).
    """
    # --- signals (10xxx) ---
    HELP_REQUESTED        = 10101

    # --- routing errors (11xxx) ---
    UNKNOWN_SUBCOMMAND    = 11102

    # --- switch/flag/option errors (11xxx) ---
    UNKNOWN_SWITCH        = 11112
    OPTION_VALUE_REQUIRED = 11117
    INVALID_VALUE         = 11126

    # --- usage errors (11xxx) ---
    USAGE                 = 11151

    def normalize(self):
        """
        return a host-normalized string for this code.

        when __main__ defines no __codes__ mapping, the numeric value is used.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _styles(defaults):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


class CommandException(Exception):
    """
    base type for user-facing command faults.

    options (read-only mapping)
    - code, title, hint: rendering metadata (class defaults apply when absent).
    - synopsis: usage block appended to the message (see __str__).
    - program, shell, fancy, colorful, console: runtime options merged in by trigger().
    """
    code = Unset
    title = "command error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)
        super().__init__(str(self))

    def __str__(self):
        return "\n".join(filter(None, (coalesce(self.message, ""), self.synopsis)))

    @property
    def synopsis(self):
        return self.options.get("synopsis", "")

    @property
    def hint(self):
        return self.options.get("hint", "")

    def __rich__(self):
        styles = _styles({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "synopsis": "dim #C8C8D0",
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })
        colorful = self.options.get("colorful", False)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        code = self.options.get("code", type(self).code)
        title = self.options.get("title", type(self).title)

        header = Text.assemble(
            "[ ",
            text(self.options.get("program", "") or "?", "prog-name"),
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "-", "code"),
            " | ",
            text(title.title(), "error-title"),
            " ]"
        )
        renders = [text(coalesce(self.message, ""), "error-message")]
        if self.synopsis:
            renders.append(text(self.synopsis, "synopsis"))
        if self.hint:
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(self.hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        self.options.get("console", console).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownSubcommandError(CommandException):
    """
    the leading token at a level with children matched no child name.
    """
    code = FaultCode.UNKNOWN_SUBCOMMAND
    title = "unknown subcommand"

    @property
    def name(self):
        return self.options.get("name")


class FlagParseError(CommandException):
    """
    typed-option parse failure; carries the parser diagnostic and the synopsis.
    """
    title = "invalid option"

    @property
    def diagnostic(self):
        return coalesce(self.message, "")


class UnknownSwitchError(FlagParseError):
    code = FaultCode.UNKNOWN_SWITCH
    title = "unknown option or flag"


class OptionValueRequiredError(FlagParseError):
    code = FaultCode.OPTION_VALUE_REQUIRED
    title = "missing option value"


class InvalidValueError(FlagParseError):
    code = FaultCode.INVALID_VALUE
    title = "invalid option value"


class UsageError(CommandException):
    """
    raised by run callbacks when positionals do not fit the usage.
    """
    code = FaultCode.USAGE
    title = "usage error"


class HelpRequested(Exception):
    """
    control signal: print `text` and finish successfully.

    `text` is the synopsis of the command that saw the help flag; hosts that
    want the full manual page can render DocRenderer.help_text() instead.
    """
    code = FaultCode.HELP_REQUESTED

    def __init__(self, text="", /, **options):
        assert isinstance(text, str)
        self.text = text
        self.options = MappingProxyType(options)
        super().__init__(text)

    def __rich__(self):
        return Text(self.text)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        # printed verbatim: synopsis lines are never re-flowed to the console width
        self.options.get("stdout", Console()).print(self, soft_wrap=True)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.text, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods.
    - options are merged into the fault via copy.replace(fault, **options).
    - in shell mode the fault is printed with rich; otherwise it is raised.
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
    optional documentation for a fault code, from a __docs__ mapping in __main__.

    returns None when the host documents nothing for the code.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "CommandException",
    "UnknownSubcommandError",
    "FlagParseError",
    "UnknownSwitchError",
    "OptionValueRequiredError",
    "InvalidValueError",
    "UsageError",
    "HelpRequested",
    "trigger",
    "getdoc",
)
