"""Structural Scanner — Find loops and how deeply they nest.

Walks sanitized C-family text once, recognising just enough statement
structure to know which loops sit inside which:

    { ... }              block
    for (...) / while (...)   loop, body is one statement
    do ... while (...);  loop, always linear
    if (...) / else / switch (...)   branch, adds no depth
    #...                 preprocessor line, opaque
    case x: / label:     label, consumed on its own
    anything else        simple statement up to ';', '{' or '}'

There is no syntax tree. Each statement kind has its own handler, and
nested statements live on an explicit stack of frames instead of the
Python call stack, so machine-generated input with thousands of nesting
levels cannot hit the recursion limit. Every frame records the deepest
linear and logarithmic nesting found inside it; a loop adds its own
factor when its body is done.

A ``while`` loop whose condition looks linear is told about each simple
statement of its own body as the scan passes it (``n /= 2;``,
``mid = (lo + hi) / 2;``). Statements inside a nested loop belong to that
loop. Text is never reread, so the scan stays linear in the input.

Malformed input never raises. Unbalanced braces or parentheses just end
the scan early, which can only underestimate depth.
"""

import logging
from dataclasses import dataclass

from bigolens.analysis.classifier import (
    IterationFactor,
    classify_for,
    classify_while,
    free_identifiers,
    statement_rescales,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoopMetrics:
    """Counters gathered by one scan."""

    loop_count: int = 0
    max_linear_depth: int = 0
    max_log_depth: int = 0


# ---------------------------------------------------------------------------
# Scan frames
# ---------------------------------------------------------------------------

_START = "start"    # begin a child statement at the given offset
_FINISH = "finish"  # the frame's statement ends at the given offset


@dataclass
class _Frame:
    """A statement whose children are still being scanned."""

    kind: str           # root, block, for, while, do, if, switch, else
    cursor: int         # offset where scanning of this frame resumes
    header: str = ""
    stage: int = 0      # number of child statements completed
    linear: int = 0     # deepest linear nesting inside this statement
    log: int = 0        # deepest logarithmic nesting inside this statement
    # while loops only: condition identifiers, and whether the body rescales one
    names: frozenset[str] = frozenset()
    rescaled: bool = False
    # innermost while loop whose own iteration this statement belongs to
    watch: "_Frame | None" = None

    def watched_loop(self) -> "_Frame | None":
        """The while loop that statements started directly in this frame report to."""
        if self.kind == "while":
            return self
        if self.kind in ("for", "do"):
            return None
        return self.watch

    def absorb(self, end: int, linear: int, log: int) -> None:
        """Record a finished child statement."""
        self.cursor = end
        self.stage += 1
        self.linear = max(self.linear, linear)
        self.log = max(self.log, log)


def _match_parentheses(text: str) -> dict[int, int]:
    """
    Pair every ``(`` with its closing ``)`` in one pass.

    Gives the same partner as counting depth forward from each ``(``, so a
    header search is a lookup. Unclosed ``(`` have no entry and a ``)``
    with nothing open is ignored.
    """
    closing = {}
    opened = []
    for i, ch in enumerate(text):
        if ch == "(":
            opened.append(i)
        elif ch == ")" and opened:
            closing[opened.pop()] = i
    return closing


class _Scanner:
    """Single-use scanner over one sanitized text."""

    def __init__(self, text: str):
        self.text = text
        self.length = len(text)
        self.loop_count = 0
        self._closing = _match_parentheses(text)
        self._watch: _Frame | None = None
        self._resume_handlers = {
            "root": self._resume_root,
            "block": self._resume_block,
            "for": self._resume_loop,
            "while": self._resume_loop,
            "do": self._resume_do,
            "if": self._resume_branch,
            "switch": self._resume_branch,
            "else": self._resume_branch,
        }

    def run(self) -> LoopMetrics:
        root = _Frame("root", cursor=0)
        stack = [root]

        while stack:
            frame = stack[-1]
            action, pos = self._resume_handlers[frame.kind](frame)

            if action == _START:
                self._watch = frame.watched_loop()
                child = self._begin(pos)
                if isinstance(child, _Frame):
                    child.watch = self._watch
                    stack.append(child)
                else:
                    frame.absorb(child, 0, 0)
                continue

            stack.pop()
            if stack:
                stack[-1].absorb(pos, frame.linear, frame.log)

        return LoopMetrics(
            loop_count=self.loop_count,
            max_linear_depth=root.linear,
            max_log_depth=root.log,
        )

    # ── Lexical helpers ────────────────────────────────────────

    def _skip_ws(self, pos: int) -> int:
        while pos < self.length and self.text[pos].isspace():
            pos += 1
        return pos

    def _read_word(self, pos: int) -> tuple[str, int]:
        end = pos
        while end < self.length and (self.text[end].isalnum() or self.text[end] == "_"):
            end += 1
        return self.text[pos:end], end

    def _find_header(self, pos: int) -> tuple[int, int] | None:
        """
        Locate a balanced ``( ... )`` starting at the next non-space char.

        Only parentheses are counted. Returns the offsets of the opening
        and closing parenthesis, or None if there is no ``(`` or it never
        closes.
        """
        start = self._skip_ws(pos)
        if start >= self.length or self.text[start] != "(":
            return None

        close = self._closing.get(start)
        if close is None:
            return None
        return start, close

    def _skip_directive(self, pos: int) -> int:
        """Consume a preprocessor line, following backslash continuations."""
        i = pos
        while i < self.length:
            if self.text[i] == "\n":
                j = i - 1
                if j > pos and self.text[j] == "\r":
                    j -= 1
                if self.text[j] != "\\":
                    return i + 1
            i += 1
        return self.length

    def _label_end(self, word: str, end: int) -> int | None:
        """Return the offset after ``case ...:`` or ``name:``, or None."""
        pos = self._skip_ws(end)
        if word == "case":
            i = pos
            while i < self.length:
                ch = self.text[i]
                if ch == ":":
                    if self.text[i + 1:i + 2] == ":":
                        i += 2
                        continue
                    return i + 1
                if ch in ";{}":
                    return None
                i += 1
            return None

        if pos < self.length and self.text[pos] == ":" and self.text[pos + 1:pos + 2] != ":":
            return pos + 1
        return None

    # ── Statement dispatch ─────────────────────────────────────

    def _begin(self, pos: int) -> "_Frame | int":
        """
        Start the statement at ``pos``.

        Returns either the end offset of a statement that needed no
        children, or a new frame to push.
        """
        pos = self._skip_ws(pos)
        if pos >= self.length:
            return self.length

        ch = self.text[pos]
        if ch == "}":
            return pos
        if ch == "{":
            return _Frame("block", cursor=pos + 1)
        if ch == ";":
            return pos + 1
        if ch == "#":
            return self._skip_directive(pos)

        if ch.isalpha() or ch == "_":
            word, end = self._read_word(pos)
            if word in ("for", "while"):
                return self._begin_loop(word, end)
            if word == "do":
                return _Frame("do", cursor=end)
            if word in ("if", "switch"):
                return self._begin_branch(word, end)
            if word == "else":
                return _Frame("else", cursor=end)

            label_end = self._label_end(word, end)
            if label_end is not None:
                return label_end

        return self._consume_simple(pos)

    def _begin_loop(self, keyword: str, end: int) -> "_Frame | int":
        header = self._find_header(end)
        if header is None:
            logger.debug("'%s' at offset %d has no balanced header", keyword, end)
            return self._consume_simple(end)

        open_paren, close_paren = header
        text = self.text[open_paren + 1:close_paren]
        return _Frame(
            keyword,
            cursor=close_paren + 1,
            header=text,
            names=frozenset(free_identifiers(text)) if keyword == "while" else frozenset(),
        )

    def _begin_branch(self, keyword: str, end: int) -> "_Frame | int":
        header = self._find_header(end)
        if header is None:
            return self._consume_simple(end)
        return _Frame(keyword, cursor=header[1] + 1)

    def _consume_simple(self, pos: int) -> "_Frame | int":
        """
        Scan an ordinary statement.

        Stops after an un-nested ``;``, turns an un-nested ``{`` into a
        block (function bodies, class bodies, initializer lists) and stops
        before an un-nested ``}``. A stray ``)`` or ``]`` is skipped.
        """
        depth = 0
        for i in range(pos, self.length):
            ch = self.text[i]
            if ch in "([":
                depth += 1
            elif ch in ")]":
                if depth > 0:
                    depth -= 1
            elif depth == 0:
                if ch == ";":
                    self._inspect_statement(pos, i + 1)
                    return i + 1
                if ch == "{":
                    self._inspect_statement(pos, i)
                    return _Frame("block", cursor=i + 1)
                if ch == "}":
                    self._inspect_statement(pos, i)
                    return i
        self._inspect_statement(pos, self.length)
        return self.length

    def _inspect_statement(self, start: int, end: int) -> None:
        """Let the enclosing while loop see a statement of its body, once."""
        loop = self._watch
        if loop is None or loop.rescaled:
            return
        if statement_rescales(self.text[start:end], loop.names):
            loop.rescaled = True

    # ── Frame handlers ─────────────────────────────────────────

    def _resume_root(self, frame: _Frame) -> tuple[str, int]:
        pos = self._skip_ws(frame.cursor)
        # A stray '}' or ')' at top level closes nothing
        while pos < self.length and self.text[pos] in "})":
            pos = self._skip_ws(pos + 1)
        if pos >= self.length:
            return _FINISH, self.length
        return _START, pos

    def _resume_block(self, frame: _Frame) -> tuple[str, int]:
        pos = self._skip_ws(frame.cursor)
        if pos >= self.length:
            return _FINISH, self.length
        if self.text[pos] == "}":
            return _FINISH, pos + 1
        return _START, pos

    def _resume_loop(self, frame: _Frame) -> tuple[str, int]:
        if frame.stage == 0:
            return _START, frame.cursor

        if frame.kind == "for":
            factor = classify_for(frame.header)
        else:
            factor = classify_while(frame.header, body_rescales=frame.rescaled)

        self._count_loop(frame, factor)
        return _FINISH, frame.cursor

    def _resume_do(self, frame: _Frame) -> tuple[str, int]:
        if frame.stage == 0:
            return _START, frame.cursor

        self._count_loop(frame, IterationFactor.LINEAR)

        word, end = self._read_word(self._skip_ws(frame.cursor))
        if word != "while":
            return _FINISH, frame.cursor

        header = self._find_header(end)
        if header is None:
            return _FINISH, end

        pos = self._skip_ws(header[1] + 1)
        if pos < self.length and self.text[pos] == ";":
            pos += 1
        return _FINISH, pos

    def _resume_branch(self, frame: _Frame) -> tuple[str, int]:
        if frame.stage == 0:
            return _START, frame.cursor

        if frame.kind == "if" and frame.stage == 1:
            word, end = self._read_word(self._skip_ws(frame.cursor))
            if word == "else":
                return _START, end

        return _FINISH, frame.cursor

    def _count_loop(self, frame: _Frame, factor: IterationFactor) -> None:
        self.loop_count += 1
        if factor is IterationFactor.LINEAR:
            frame.linear += 1
        elif factor is IterationFactor.LOGARITHMIC:
            frame.log += 1


def scan_loops(sanitized: str) -> LoopMetrics:
    """
    Count loops and their deepest linear / logarithmic nesting.

    Args:
        sanitized: Source text with comments and literals blanked
                   (see :func:`bigolens.analysis.sanitizer.sanitize`)

    Returns:
        LoopMetrics with loop_count, max_linear_depth, max_log_depth

    Example:
        >>> scan_loops("for(int i=0;i<n;i++){ for(int j=1;j<n;j*=2){} }")
        LoopMetrics(loop_count=2, max_linear_depth=1, max_log_depth=1)
    """
    metrics = _Scanner(sanitized).run()
    logger.debug(
        "Scanned %d chars: %d loop(s), linear depth %d, log depth %d",
        len(sanitized),
        metrics.loop_count,
        metrics.max_linear_depth,
        metrics.max_log_depth,
    )
    return metrics
