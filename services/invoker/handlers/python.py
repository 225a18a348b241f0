"""
Where: services/invoker/handlers/python.py
What: Handler resolution for the python runtime group.
Why: Python handlers are `module.function` paths relative to the function's code root.

Handler format: `path/to/module.function` or `path.to.module.function`.
A valid handler is a top-level (async) function callable as `handler(event, context)`.
"""

import ast
import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from ..core.project import Project
from ..core.runtimes import Runtime, RuntimeGroup
from ..models.spec import HandlerLocation, SourceElement
from .base import HandlerResolverStrategy

logger = logging.getLogger("invoker.handlers.python")

FunctionNode = Union[ast.FunctionDef, ast.AsyncFunctionDef]


def _split_handler(handler: str) -> Optional[tuple]:
    module, sep, function = handler.strip().rpartition(".")
    if not sep or not module or not function:
        return None
    module_parts = [p for p in module.replace("/", ".").split(".") if p]
    if not module_parts:
        return None
    return module_parts, function


def _parse(path: Path) -> Optional[ast.Module]:
    try:
        return ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    except (OSError, SyntaxError, UnicodeDecodeError, ValueError) as e:
        logger.debug(f"Skipping unparsable source {path}: {e}")
        return None


def _top_level_functions(tree: ast.Module) -> List[FunctionNode]:
    return [n for n in tree.body if isinstance(n, (ast.FunctionDef, ast.AsyncFunctionDef))]


class PythonHandlerResolver(HandlerResolverStrategy):
    runtime_group = RuntimeGroup.PYTHON

    def find_source_locations(
        self, project: Project, runtime: Runtime, handler: str
    ) -> List[HandlerLocation]:
        split = _split_handler(handler)
        if split is None:
            return []
        module_parts, function = split
        suffix = tuple(module_parts[:-1]) + (f"{module_parts[-1]}.py",)

        locations = []
        for path in project.iter_files(".py"):
            if path.parts[-len(suffix):] != suffix:
                continue
            tree = _parse(path)
            if tree is None:
                continue
            for node in _top_level_functions(tree):
                if node.name == function and self.is_valid_handler_signature(node):
                    source_root = path.parents[len(suffix) - 1]
                    locations.append(
                        HandlerLocation(
                            path=path,
                            name=handler,
                            line=node.lineno,
                            end_line=node.end_lineno or node.lineno,
                            source_root=source_root,
                        )
                    )
        return locations

    def determine_handler_identifier(self, element: SourceElement) -> Optional[str]:
        if element.kind != "function":
            return None
        path = Path(element.path)
        tree = _parse(path)
        if tree is None:
            return None

        candidates = [n for n in _top_level_functions(tree) if n.name == element.name]
        node = next((n for n in candidates if n.lineno == element.line), None)
        if node is None and len(candidates) == 1:
            node = candidates[0]
        if node is None or not self.is_valid_handler_signature(node):
            return None

        root = Path(element.source_root) if element.source_root else path.parent
        try:
            relative = path.resolve().relative_to(root.resolve()).with_suffix("")
        except ValueError:
            return None
        return ".".join(relative.parts + (node.name,))

    def is_valid_handler_signature(self, declaration: Any) -> bool:
        if not isinstance(declaration, (ast.FunctionDef, ast.AsyncFunctionDef)):
            return False
        args = declaration.args
        positional = list(args.posonlyargs) + list(args.args)
        required = len(positional) - len(args.defaults)

        # Keyword-only parameters without defaults cannot be satisfied by the runtime.
        if any(default is None for default in args.kw_defaults):
            return False
        if required > 2:
            return False
        if args.vararg is not None:
            return True
        return len(positional) >= 2
