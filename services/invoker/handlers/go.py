"""
Where: services/invoker/handlers/go.py
What: Handler resolution for the go runtime group.
Why: Go handlers are top-level functions identified by name, validated against the lambda.Start contract.

Valid handler signatures (https://docs.aws.amazon.com/lambda/latest/dg/golang-handler.html):
- 0 to 2 parameters; with 2, the first must be context.Context
- 0 to 2 results; with 1, it must be error; with 2, the second must be error
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

from ..core.project import Project
from ..core.runtimes import Runtime, RuntimeGroup
from ..models.spec import HandlerLocation, SourceElement
from .base import HandlerResolverStrategy

logger = logging.getLogger("invoker.handlers.go")

_FUNC_PATTERN = re.compile(r"^func\b", re.MULTILINE)
_IDENT_PATTERN = re.compile(r"[A-Za-z_]\w*")
_TYPE_KEYWORDS = {"chan", "func", "map", "struct", "interface"}
_PAIRS = {"(": ")", "[": "]", "{": "}"}

CONTEXT_TYPE = "context.Context"
ERROR_TYPE = "error"


@dataclass(frozen=True)
class GoParameter:
    name: Optional[str]
    type: str


@dataclass(frozen=True)
class GoFunctionDeclaration:
    name: str
    line: int
    end_line: int
    receiver: Optional[str] = None
    parameters: List[GoParameter] = field(default_factory=list)
    results: List[str] = field(default_factory=list)

    @property
    def is_method(self) -> bool:
        return self.receiver is not None


def _skip_literal(text: str, i: int) -> int:
    """Return the index just past a string, rune or comment starting at `i` (or `i` itself)."""
    ch = text[i]
    if text.startswith("//", i):
        end = text.find("\n", i)
        return len(text) if end == -1 else end
    if text.startswith("/*", i):
        end = text.find("*/", i + 2)
        return len(text) if end == -1 else end + 2
    if ch == "`":
        end = text.find("`", i + 1)
        return len(text) if end == -1 else end + 1
    if ch in "\"'":
        j = i + 1
        while j < len(text) and text[j] != ch and text[j] != "\n":
            j += 2 if text[j] == "\\" else 1
        return j + 1
    return i


def _find_closing(text: str, start: int) -> int:
    """Index of the bracket closing the one at `start`, or -1."""
    stack = [_PAIRS[text[start]]]
    i = start + 1
    while i < len(text):
        skipped = _skip_literal(text, i)
        if skipped != i:
            i = skipped
            continue
        ch = text[i]
        if ch in _PAIRS:
            stack.append(_PAIRS[ch])
        elif stack and ch == stack[-1]:
            stack.pop()
            if not stack:
                return i
        i += 1
    return -1


def _split_top_level(text: str) -> List[str]:
    parts, depth, current = [], 0, []
    for ch in text:
        if ch in _PAIRS:
            depth += 1
        elif ch in _PAIRS.values():
            depth -= 1
        if ch == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return [p for p in parts if p]


def _is_named(part: str) -> bool:
    tokens = part.split(None, 1)
    if len(tokens) != 2:
        return False
    return bool(_IDENT_PATTERN.fullmatch(tokens[0])) and tokens[0] not in _TYPE_KEYWORDS


def _parse_parameters(text: str) -> List[GoParameter]:
    parts = _split_top_level(" ".join(text.split()))
    if not any(_is_named(p) for p in parts):
        return [GoParameter(name=None, type=p) for p in parts]

    params: List[GoParameter] = []
    pending: List[str] = []
    for part in parts:
        if _is_named(part):
            name, type_ = part.split(None, 1)
            for pending_name in pending:
                params.append(GoParameter(name=pending_name, type=type_.strip()))
            pending = []
            params.append(GoParameter(name=name, type=type_.strip()))
        else:
            pending.append(part)
    # Trailing names without a type are malformed; keep them visible to the arity check.
    params.extend(GoParameter(name=n, type="") for n in pending)
    return params


def _line_of(text: str, index: int) -> int:
    return text.count("\n", 0, index) + 1


def _skip_spaces(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in " \t":
        pos += 1
    return pos


def _scan_result_type(text: str, pos: int) -> int:
    """Index where an unparenthesized result type ends (the body brace or end of line)."""
    while pos < len(text) and text[pos] not in "\r\n":
        ch = text[pos]
        if ch == "{":
            # interface{...} and struct{...} braces belong to the type, not the body.
            if not re.search(r"\b(interface|struct)\s*$", text[:pos]):
                return pos
            close = _find_closing(text, pos)
            if close == -1:
                return len(text)
            pos = close + 1
        elif ch in "([":
            close = _find_closing(text, pos)
            if close == -1:
                return len(text)
            pos = close + 1
        else:
            pos += 1
    return pos


def parse_go_functions(source: str) -> List[GoFunctionDeclaration]:
    """Extract top-level function and method declarations from Go source."""
    declarations = []
    n = len(source)
    for match in _FUNC_PATTERN.finditer(source):
        i = _skip_spaces(source, match.end())
        receiver = None
        if i < n and source[i] == "(":
            close = _find_closing(source, i)
            if close == -1:
                continue
            receiver = " ".join(source[i + 1 : close].split())
            i = _skip_spaces(source, close + 1)

        name_match = _IDENT_PATTERN.match(source, i)
        if not name_match:
            continue
        name = name_match.group(0)
        i = _skip_spaces(source, name_match.end())

        # Type parameters: func Name[T any](...)
        if i < n and source[i] == "[":
            close = _find_closing(source, i)
            if close == -1:
                continue
            i = _skip_spaces(source, close + 1)

        if i >= n or source[i] != "(":
            continue
        close = _find_closing(source, i)
        if close == -1:
            continue
        parameters = _parse_parameters(source[i + 1 : close])
        i = _skip_spaces(source, close + 1)

        results: List[str] = []
        if i < n and source[i] == "(":
            close = _find_closing(source, i)
            if close == -1:
                continue
            results = [p.type for p in _parse_parameters(source[i + 1 : close])]
            i = _skip_spaces(source, close + 1)
        elif i < n and source[i] not in "{\r\n":
            end = _scan_result_type(source, i)
            result = " ".join(source[i:end].split())
            if result:
                results = [result]
            i = end

        end_line = _line_of(source, i)
        if i < n and source[i] == "{":
            body_close = _find_closing(source, i)
            if body_close != -1:
                end_line = _line_of(source, body_close)

        declarations.append(
            GoFunctionDeclaration(
                name=name,
                line=_line_of(source, match.start()),
                end_line=end_line,
                receiver=receiver,
                parameters=parameters,
                results=results,
            )
        )
    return declarations


def _read_declarations(path: Path) -> List[GoFunctionDeclaration]:
    try:
        return parse_go_functions(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Skipping unreadable source {path}: {e}")
        return []


class GoHandlerResolver(HandlerResolverStrategy):
    runtime_group = RuntimeGroup.GO

    def find_source_locations(
        self, project: Project, runtime: Runtime, handler: str
    ) -> List[HandlerLocation]:
        handler = handler.strip()
        if not _IDENT_PATTERN.fullmatch(handler):
            return []

        locations = []
        for path in project.iter_files(".go"):
            if path.name.endswith("_test.go"):
                continue
            for decl in _read_declarations(path):
                if decl.name != handler or decl.is_method:
                    continue
                if not self.is_valid_handler_signature(decl):
                    continue
                locations.append(
                    HandlerLocation(
                        path=path,
                        name=handler,
                        line=decl.line,
                        end_line=decl.end_line,
                        source_root=path.parent,
                    )
                )
        return locations

    def determine_handler_identifier(self, element: SourceElement) -> Optional[str]:
        if element.kind != "function":
            return None
        candidates = [
            d
            for d in _read_declarations(Path(element.path))
            if d.name == element.name and not d.is_method
        ]
        decl = next((d for d in candidates if d.line == element.line), None)
        if decl is None and len(candidates) == 1:
            decl = candidates[0]
        if decl is None or not self.is_valid_handler_signature(decl):
            return None
        return decl.name

    def is_valid_handler_signature(self, declaration: Any) -> bool:
        if not isinstance(declaration, GoFunctionDeclaration):
            return False

        params = declaration.parameters
        if len(params) > 2:
            return False
        if len(params) == 2 and params[0].type != CONTEXT_TYPE:
            return False

        results = declaration.results
        if len(results) > 2:
            return False
        if len(results) == 1 and results[0] != ERROR_TYPE:
            return False
        if len(results) == 2 and results[1] != ERROR_TYPE:
            return False
        return True
