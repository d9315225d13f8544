from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from pathlib import Path

import pytest

from kubepick.commands import KubectlCommand
from kubepick.pipeline import SelectionPipeline
from kubepick.runner import CommandResult

NAMESPACE_TABLE = "NAME STATUS AGE\ndefault Active 10d\nkube-system Active 10d\n"
CRD_NAMES = (
    "customresourcedefinition.apiextensions.k8s.io/widgets.example.com\n"
    "customresourcedefinition.apiextensions.k8s.io/gadgets.example.com\n"
)
WIDGET_NAMES = "widget.example.com/alpha\nwidget.example.com/beta\n"
ALPHA_YAML = "apiVersion: example.com/v1\nkind: Widget\nmetadata:\n  name: alpha\n"


class _FakeRunner:
    def __init__(self) -> None:
        self.responses: dict[tuple[str, ...], CommandResult] = {}
        self.calls: list[tuple[str, ...]] = []

    def respond(self, *args: str, output: str = "", error: str | None = None) -> None:
        exit_code = 0 if error is None else 1
        self.responses[args] = CommandResult(output=output, error=error, exit_code=exit_code)

    def run(self, command: KubectlCommand) -> CommandResult:
        self.calls.append(command.args)
        return self.responses.get(
            command.args,
            CommandResult.failure(f"unexpected command: {command.describe()}"),
        )

    def ran(self, *args: str) -> bool:
        return args in self.calls


class _ScriptedPicker:
    def __init__(self) -> None:
        self.selections: list[str | None] = []
        self.inputs: list[str | None] = []
        self.presented: list[tuple[str, list[str]]] = []
        self.prompts: list[str] = []

    def select_one(self, prompt: str, candidates: Sequence[str]) -> str | None:
        self.presented.append((prompt, list(candidates)))
        if not self.selections:
            return None
        choice = self.selections.pop(0)
        assert choice is None or choice in candidates, f"{choice!r} not offered in {prompt!r}"
        return choice

    def input_text(self, prompt: str) -> str | None:
        self.prompts.append(prompt)
        if not self.inputs:
            return None
        return self.inputs.pop(0)


class _CaptureSink:
    def __init__(self) -> None:
        self.documents: list[tuple[str, str, list[str]]] = []

    def create_document(self, name: str, content_type: str, lines: Sequence[str]) -> None:
        self.documents.append((name, content_type, list(lines)))


class _CaptureReporter:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def of_level(self, level: str) -> list[str]:
        return [message for kind, message in self.messages if kind == level]


@pytest.fixture
def runner() -> _FakeRunner:
    fake = _FakeRunner()
    fake.respond("config", "get-contexts", "-o", "name", output="kind-dev\nprod\n")
    fake.respond("config", "use-context", "kind-dev", output='Switched to context "kind-dev".\n')
    fake.respond("config", "use-context", "prod", output='Switched to context "prod".\n')
    fake.respond("get", "namespaces", output=NAMESPACE_TABLE)
    fake.respond("get", "crd", "-o", "name", output=CRD_NAMES)
    fake.respond("get", "widgets.example.com", "-o", "name", output=WIDGET_NAMES)
    fake.respond("get", "widgets.example.com/alpha", "-o", "yaml", output=ALPHA_YAML)
    return fake


@pytest.fixture
def picker() -> _ScriptedPicker:
    return _ScriptedPicker()


@pytest.fixture
def sink() -> _CaptureSink:
    return _CaptureSink()


@pytest.fixture
def reporter() -> _CaptureReporter:
    return _CaptureReporter()


@pytest.fixture
def pipeline(
    runner: _FakeRunner,
    picker: _ScriptedPicker,
    sink: _CaptureSink,
    reporter: _CaptureReporter,
) -> SelectionPipeline:
    return SelectionPipeline(runner=runner, picker=picker, reporter=reporter, sink=sink)


@pytest.fixture(autouse=True)
def _isolated_user_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:  # pyright: ignore[reportUnusedFunction]
    monkeypatch.setenv("KUBEPICK_CONFIG_FILE", str(tmp_path / "no-such-config.yaml"))


@pytest.fixture(autouse=True)
def _reset_kubepick_logger() -> Iterator[None]:  # pyright: ignore[reportUnusedFunction]
    yield
    logger = logging.getLogger("kubepick")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
