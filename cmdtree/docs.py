"""
Documentation derived from a command's usage and description templates.

DocRenderer
- name(command): explicit key, else the first word of the usage.
- synopsis(command): "Usage: <program> ..." block, one line per usage form.
- help_text(command): manual-style markdown page (ronn flavored).
- usage_error(command, message): UsageError carrying message and synopsis.

Text transforms
Each rule is a plain str -> str function so it can be tested on its own.
The description body goes through TRANSFORMS in this exact order, since
later rules rely on the earlier ones (definition lists are only detected once
one indentation level has been stripped):

    strip_indentation   "\\tfoo"                       -> "foo"
    normalize_headings  "## Options:"                  -> "## Options"
    definition_lists    "-p, --private\\n\\tMake it."    -> "-p, --private\\n:\\tMake it."
    normalize_quotes    "run 'tool sync'"              -> "run `tool sync`"

The usage block of the page goes through reference_usage:

    reference_usage("sync [-v]", "tool")               -> "`tool sync` [-v]"

The output of the pipeline has no tab-indented lines and no convertible
quotes left, so running it again changes nothing.
"""
import os.path
import re
import sys

from .faults import UsageError
from .utils import Unset, coalesce

USAGE_LABEL = "Usage:"

_TERM = re.compile(r"(?:\* )?(?P<term>[^#:\s].*?):?")
_QUOTE = re.compile(r"(?<!\w)['‘’]|['‘’](?!\w)")
_USAGE = re.compile(r"(?m)^([a-z-]+)(.*)$")
_HEADING = re.compile(r"(?m)^(## .+?):+[ \t]*$")
_INDENT = re.compile(r"(?m)^\t")


def usage_name(usage, /):
    """
    First whitespace-delimited word of the first line of `usage` ("" when blank).
    """
    words = usage.strip().split("\n")[0].split()
    return words[0] if words else ""


def strip_indentation(text, /):
    """
    Remove one leading tab from every line.
    """
    return _INDENT.sub("", text)


def normalize_headings(text, /):
    """
    Turn "## Heading:" lines into "## Heading" (every trailing colon goes).
    """
    return _HEADING.sub(r"\1", text)


def definition_lists(text, /):
    """
    Turn a term line followed by a tab-indented block into a definition.

    - term: a non-empty line not starting with '#', ':' or whitespace; an
      optional "* " bullet and a trailing ':' are dropped.
    - definition: ":\\t" plus the first block line without its tab; further
      block lines lose their tab and are indented with two spaces.
    - a tab-indented block without a term becomes a four-space code block.
    """
    lines = text.split("\n")
    output = []
    index = 0

    while index < len(lines):
        line = lines[index]
        if line.startswith("\t"):
            term, start = None, index
        else:
            term, start = _TERM.fullmatch(line), index + 1

        end = start
        while end < len(lines) and lines[end].startswith("\t"):
            end += 1
        block = [entry[1:] for entry in lines[start:end]]

        if start > index:
            output.append(term["term"] if term and block else line)
        if term and block:
            first, *rest = block
            output.append(":\t" + first)
            output.extend("  " + entry for entry in rest)
        else:
            output.extend("    " + entry for entry in block)
        index = end

    return "\n".join(output)


def normalize_quotes(text, /):
    """
    Turn single quotes (straight or curly) into backticks.

    Apostrophes between two word characters ("don't") are left alone; a
    trailing possessive ("users' files") reads like a closing quote and
    becomes a backtick too.
    """
    return _QUOTE.sub("`", text)


def reference_usage(usage, program, /):
    """
    Wrap the leading lowercase-hyphen word of each usage line as inline code.

    "clone [-p]" -> "`tool clone` [-p]" followed by two spaces (a markdown
    line break); the whole block is trimmed afterwards.
    """
    return _USAGE.sub(lambda match: "`%s %s`%s  " % (program, match[1], match[2]), usage).strip()


TRANSFORMS = (
    strip_indentation,
    normalize_headings,
    definition_lists,
    normalize_quotes,
)


def normalize(text, /):
    """
    Run the description body through every transform, in order.
    """
    for transform in TRANSFORMS:
        text = transform(text)
    return text


class DocRenderer:
    """
    Renders synopsis/help for commands of one program.

    The program name defaults to __main__.__prog__, else the basename of
    sys.argv[0].
    """

    def __init__(self, program=Unset, /):
        if not isinstance(program, str | Unset):
            raise TypeError("doc renderer 'program' must be a string")
        self.program = coalesce(program, getattr(__import__("__main__"), "__prog__", os.path.basename(sys.argv[0])))

    def __repr__(self):
        return "doc-renderer(program=%r)" % self.program

    def name(self, command, /):
        return command.key or usage_name(command.usage)

    def _usage_lines(self, command):
        usage = command.usage
        if not usage and command.parent is not None:
            usage = command.parent.usage
        return [line for line in map(str.strip, usage.split("\n")) if line]

    def synopsis(self, command, /):
        """
        "Usage: <program> <form>" for the first form; later forms are aligned
        under it. Falls back to the parent's usage (one level) when empty.
        """
        lines = []
        prefix = USAGE_LABEL
        for line in self._usage_lines(command):
            lines.append("%s %s %s" % (prefix, self.program, line))
            prefix = " " * len(USAGE_LABEL)
        return "\n".join(lines)

    def help_text(self, command, /):
        """
        Manual page: title line, synopsis section, normalized description body.

        The summary is the first line of the description when it has several
        lines, else the whole description (and the body is empty).
        """
        description = command.long.strip()
        summary, _, body = description.partition("\n")

        usage = reference_usage("\n".join(self._usage_lines(command)), self.program)

        return "%s-%s(1) -- %s\n===\n\n## Synopsis\n\n%s\n%s" % (
            self.program,
            self.name(command),
            normalize_quotes(summary),
            usage,
            normalize(body),
        )

    def usage_error(self, command, message="", /):
        """
        UsageError whose text is `message`, a newline, then the synopsis
        (just the synopsis when `message` is empty).
        """
        return UsageError(message, synopsis=self.synopsis(command), program=self.program)


__all__ = (
    "DocRenderer",
    "USAGE_LABEL",
    "TRANSFORMS",
    "usage_name",
    "strip_indentation",
    "normalize_headings",
    "definition_lists",
    "normalize_quotes",
    "reference_usage",
    "normalize",
)
