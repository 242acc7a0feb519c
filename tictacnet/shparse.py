"""Parser for shell command lines: pipes, lists, background jobs, redirections."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

MAXARGS = 10

_WHITESPACE = " \t\r\n\v"
_SYMBOLS = "<|>&;()"
_SINGLE = "|();&<"


class ShellSyntaxError(Exception):
    """A command line that cannot be parsed."""

    def __init__(self, message: str, leftovers: Optional[str] = None):
        super().__init__(message)
        self.leftovers = leftovers


@dataclass
class ExecCmd:
    argv: list = field(default_factory=list)


@dataclass
class RedirCmd:
    """Run ``cmd`` with ``fd`` opened on ``file``; mode is ``<``, ``>`` or ``>>``."""

    cmd: "Command"
    file: str
    mode: str
    fd: int


@dataclass
class PipeCmd:
    left: "Command"
    right: "Command"


@dataclass
class ListCmd:
    left: "Command"
    right: "Command"


@dataclass
class BackCmd:
    cmd: "Command"


Command = Union[ExecCmd, RedirCmd, PipeCmd, ListCmd, BackCmd]

_REDIRECTIONS = {"<": ("<", 0), ">": (">", 1), "+": (">>", 1)}


class _Parser:
    def __init__(self, line: str):
        self.line = line
        self.pos = 0

    def _skip_space(self) -> None:
        line = self.line
        while self.pos < len(line) and line[self.pos] in _WHITESPACE:
            self.pos += 1

    def peek(self, tokens: str) -> bool:
        self._skip_space()
        return self.pos < len(self.line) and self.line[self.pos] in tokens

    def token(self) -> tuple[str, str]:
        """Return the token kind ('' at the end, 'a' for a word) and its text."""
        self._skip_space()
        line = self.line
        start = self.pos
        if self.pos >= len(line):
            kind = ""
        elif line[self.pos] in _SINGLE:
            kind = line[self.pos]
            self.pos += 1
        elif line[self.pos] == ">":
            kind = ">"
            self.pos += 1
            if self.pos < len(line) and line[self.pos] == ">":
                kind = "+"
                self.pos += 1
        else:
            kind = "a"
            while (
                self.pos < len(line)
                and line[self.pos] not in _WHITESPACE
                and line[self.pos] not in _SYMBOLS
            ):
                self.pos += 1
        text = line[start:self.pos]
        self._skip_space()
        return kind, text

    def parse_line(self) -> Command:
        cmd = self.parse_pipe()
        while self.peek("&"):
            self.token()
            cmd = BackCmd(cmd)
        if self.peek(";"):
            self.token()
            cmd = ListCmd(cmd, self.parse_line())
        return cmd

    def parse_pipe(self) -> Command:
        cmd = self.parse_exec()
        if self.peek("|"):
            self.token()
            cmd = PipeCmd(cmd, self.parse_pipe())
        return cmd

    def parse_redirs(self, cmd: Command) -> Command:
        while self.peek("<>"):
            kind, _ = self.token()
            file_kind, name = self.token()
            if file_kind != "a":
                raise ShellSyntaxError("missing file for redirection")
            mode, fd = _REDIRECTIONS[kind]
            cmd = RedirCmd(cmd, name, mode, fd)
        return cmd

    def parse_block(self) -> Command:
        if not self.peek("("):
            raise ShellSyntaxError("parseblock")
        self.token()
        cmd = self.parse_line()
        if not self.peek(")"):
            raise ShellSyntaxError("syntax - missing )")
        self.token()
        return self.parse_redirs(cmd)

    def parse_exec(self) -> Command:
        if self.peek("("):
            return self.parse_block()
        exec_cmd = ExecCmd()
        cmd = self.parse_redirs(exec_cmd)
        while not self.peek("|)&;"):
            kind, word = self.token()
            if not kind:
                break
            if kind != "a":
                raise ShellSyntaxError("syntax")
            exec_cmd.argv.append(word)
            if len(exec_cmd.argv) >= MAXARGS:
                raise ShellSyntaxError("too many args")
            cmd = self.parse_redirs(cmd)
        return cmd


def parse_command(line: str) -> Command:
    """Parse a whole command line into a command tree."""
    parser = _Parser(line)
    cmd = parser.parse_line()
    parser.peek("")
    if parser.pos != len(line):
        raise ShellSyntaxError("syntax", leftovers=line[parser.pos:])
    return cmd