"""
Conformance tests run against every bundled handler resolver strategy.
"""

import textwrap
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

import pytest

from services.invoker.core.project import Project
from services.invoker.core.runtimes import Runtime
from services.invoker.handlers import GoHandlerResolver, HandlerResolverRegistry, PythonHandlerResolver
from services.invoker.models import SourceElement

PYTHON_APP = """\
import json


def handler(event, context):
    return {"body": json.dumps(event)}


def too_many(event, context, extra):
    return event


class Service:
    def handle(self, event, context):
        return event
"""

GO_MAIN = """\
package main

import (
	"context"
)

type Service struct{}

func handler(ctx context.Context, event MyEvent) (string, error) {
	return "", nil
}

func tooMany(ctx context.Context, event MyEvent, extra int) error {
	return nil
}

func (s *Service) handle(ctx context.Context) error {
	return nil
}
"""


@dataclass
class Case:
    strategy: object
    runtime: Runtime
    files: Dict[str, str]
    source: str
    handler: str
    line: int
    end_line: int
    element_name: str
    invalid_handler: str
    invalid_name: str
    invalid_line: int
    method_handler: str
    extra: Dict[str, str] = field(default_factory=dict)


CASES = [
    Case(
        strategy=PythonHandlerResolver(),
        runtime=Runtime.PYTHON3_12,
        files={"hello/app.py": PYTHON_APP},
        source="hello/app.py",
        handler="hello.app.handler",
        line=4,
        end_line=5,
        element_name="handler",
        invalid_handler="hello.app.too_many",
        invalid_name="too_many",
        invalid_line=8,
        method_handler="hello.app.handle",
    ),
    Case(
        strategy=GoHandlerResolver(),
        runtime=Runtime.GO1_X,
        files={"hello/main.go": GO_MAIN},
        source="hello/main.go",
        handler="handler",
        line=9,
        end_line=11,
        element_name="handler",
        invalid_handler="tooMany",
        invalid_name="tooMany",
        invalid_line=13,
        method_handler="handle",
    ),
]


@pytest.fixture(params=CASES, ids=lambda c: type(c.strategy).__name__)
def case(request):
    return request.param


@pytest.fixture
def case_project(case, tmp_path):
    for name, content in case.files.items():
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content), encoding="utf-8")
    return Project.at(tmp_path)


def element(case, project, name, line, end_line, kind="function"):
    return SourceElement(
        path=project.root / case.source,
        name=name,
        line=line,
        end_line=end_line,
        kind=kind,
        source_root=project.root,
    )


def test_registered_for_runtime_group(case):
    registry = HandlerResolverRegistry.create_default(load_plugins=False)
    assert isinstance(registry.for_runtime(case.runtime), type(case.strategy))
    assert case.runtime in case.strategy.runtime_group.runtimes


def test_finds_valid_handler(case, case_project):
    locations = case.strategy.find_source_locations(case_project, case.runtime, case.handler)

    assert len(locations) == 1
    location = locations[0]
    assert location.path == case_project.root / case.source
    assert location.name == case.handler
    assert location.line == case.line
    assert location.end_line == case.end_line


def test_invalid_signature_is_not_a_handler(case, case_project):
    assert case.strategy.find_source_locations(case_project, case.runtime, case.invalid_handler) == []


def test_methods_are_not_handlers(case, case_project):
    assert case.strategy.find_source_locations(case_project, case.runtime, case.method_handler) == []


@pytest.mark.parametrize("handler", ["", "   ", "missing", "nope.missing"])
def test_unknown_handler(case, case_project, handler):
    assert case.strategy.find_source_locations(case_project, case.runtime, handler) == []


def test_lookup_does_not_modify_project(case, case_project):
    before = {p: (p.read_bytes(), p.stat().st_mtime_ns) for p in case_project.root.rglob("*") if p.is_file()}

    for _ in range(2):
        case.strategy.find_source_locations(case_project, case.runtime, case.handler)

    after = {p: (p.read_bytes(), p.stat().st_mtime_ns) for p in case_project.root.rglob("*") if p.is_file()}
    assert before == after


def test_determine_handler_identifier(case, case_project):
    identifier = case.strategy.determine_handler_identifier(
        element(case, case_project, case.element_name, case.line, case.end_line)
    )

    assert identifier == case.handler
    # The identifier leads back to the same declaration.
    location = case.strategy.find_source_locations(case_project, case.runtime, identifier)[0]
    assert location.line == case.line


def test_determine_handler_identifier_rejects_invalid_signature(case, case_project):
    invalid = element(case, case_project, case.invalid_name, case.invalid_line, case.invalid_line + 2)
    assert case.strategy.determine_handler_identifier(invalid) is None


def test_determine_handler_identifier_rejects_non_functions(case, case_project):
    cls = element(case, case_project, case.element_name, case.line, case.end_line, kind="class")
    assert case.strategy.determine_handler_identifier(cls) is None


def test_determine_handler_identifier_missing_file(case, tmp_path):
    missing = SourceElement(
        path=tmp_path / Path(case.source).name, name=case.element_name, line=1, end_line=1
    )
    assert case.strategy.determine_handler_identifier(missing) is None


@pytest.mark.parametrize("declaration", [None, "def handler(event, context)", object()])
def test_signature_check_rejects_foreign_values(case, declaration):
    assert case.strategy.is_valid_handler_signature(declaration) is False


def test_display_name_defaults_to_handler(case):
    assert case.strategy.handler_display_name(case.handler) == case.handler
