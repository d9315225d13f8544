"""Selection pipelines: list candidates, ask the operator, act, continue.

Every workflow is an ordered tuple of steps. A step receives the accumulated
``PipelineContext`` and returns a new one with its selection captured, or raises:

- ``SelectionCancelled`` when the operator declines to choose (a normal end),
- ``KubepickError`` when a listing, precondition or action fails.

``SelectionPipeline.run`` is the only place those exceptions are handled, so a
failure in any step ends the workflow before later steps run and the context
built so far is dropped with it.

The active kubectl context is process-wide state owned by the kubeconfig file.
Switching it is last-writer-wins: two workflows running at the same time can
interleave their ``use-context`` calls and no locking is done here.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, fields, replace
from enum import Enum
from functools import partial
from pathlib import Path
from typing import Any, TypeVar

from kubepick import actions, commands
from kubepick.documents import ActiveDocument, ConsoleDocumentSink, DocumentSink
from kubepick.errors import (
    ContextSwitchError,
    KubepickError,
    PreconditionError,
    SelectionAlreadyCapturedError,
    SelectionCancelled,
)
from kubepick.lister import ResourceLister
from kubepick.picker import Picker
from kubepick.reporting import Reporter
from kubepick.runner import ProcessRunner

LOGGER = logging.getLogger("kubepick.pipeline")

CREATE_NAMESPACE_SENTINEL = "[Create New Namespace]"
AFFIRMATIVE_TOKENS: frozenset[str] = frozenset({"y", "Y"})

_T = TypeVar("_T")


class WorkflowStatus(Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class PipelineContext:
    cluster_context: str | None = None
    namespace: str | None = None
    crd: str | None = None
    instance: str | None = None
    manifest_path: Path | None = None
    document_name: str | None = None

    def capture(self, **selection: Any) -> PipelineContext:
        known = {field.name for field in fields(self)}
        for name in selection:
            if name not in known:
                raise TypeError(f"unknown pipeline field: {name}")
            if getattr(self, name) is not None:
                raise SelectionAlreadyCapturedError(f"{name} has already been selected")
        return replace(self, **selection)


Step = Callable[[PipelineContext], PipelineContext]


@dataclass(frozen=True)
class Workflow:
    name: str
    steps: tuple[Step, ...]


@dataclass(frozen=True)
class WorkflowResult:
    workflow: str
    status: WorkflowStatus
    context: PipelineContext | None = None
    message: str | None = None

    @property
    def completed(self) -> bool:
        return self.status is WorkflowStatus.COMPLETED


def is_affirmative(answer: str | None) -> bool:
    return answer is not None and answer in AFFIRMATIVE_TOKENS


def _require(value: _T | None, label: str) -> _T:
    if value is None:
        raise PreconditionError(f"{label} has not been selected")
    return value


def _step_name(step: Step) -> str:
    if isinstance(step, partial):
        return _step_name(step.func)
    return getattr(step, "__name__", repr(step))


class SelectionPipeline:
    def __init__(
        self,
        *,
        runner: ProcessRunner,
        picker: Picker,
        reporter: Reporter,
        sink: DocumentSink | None = None,
        lister: ResourceLister | None = None,
        strict_context_switch: bool = False,
    ) -> None:
        self._runner = runner
        self._picker = picker
        self._reporter = reporter
        self._sink = sink
        self._lister = lister or ResourceLister(runner)
        self._strict_context_switch = strict_context_switch

    # Workflows.

    def browse_custom_resource(self) -> WorkflowResult:
        return self.run(
            Workflow(
                "browse-custom-resource",
                (
                    self._select_context,
                    self._select_crd,
                    self._select_cr_instance,
                    self._render_cr_detail,
                ),
            )
        )

    def select_context(self, then: Callable[[str], None] | None = None) -> WorkflowResult:
        result = self.run(Workflow("select-context", (self._select_context,)))
        if then is not None and result.context is not None and result.context.cluster_context:
            then(result.context.cluster_context)
        return result

    def select_namespace(self, then: Callable[[str], None] | None = None) -> WorkflowResult:
        result = self.run(Workflow("select-namespace", (self._select_namespace_or_create,)))
        if then is not None and result.context is not None and result.context.namespace:
            then(result.context.namespace)
        return result

    def apply_from_document(self, document: ActiveDocument) -> WorkflowResult:
        return self.run(
            Workflow(
                "apply-manifest",
                (
                    self._select_context,
                    self._select_namespace_or_create,
                    partial(self._resolve_manifest, document),
                    self._apply_manifest,
                ),
            )
        )

    def delete_namespace(self) -> WorkflowResult:
        return self.run(
            Workflow(
                "delete-namespace",
                (
                    self._select_context,
                    self._select_namespace_to_delete,
                    self._confirm_delete,
                    self._delete_namespace,
                ),
            )
        )

    def delete_namespace_in_current_context(self) -> WorkflowResult:
        return self.run(
            Workflow(
                "delete-namespace-current-context",
                (
                    self._select_namespace_to_delete,
                    self._confirm_delete,
                    self._delete_namespace,
                ),
            )
        )

    def run(self, workflow: Workflow, context: PipelineContext | None = None) -> WorkflowResult:
        current = context or PipelineContext()
        LOGGER.info("workflow started workflow=%s", workflow.name)
        for step in workflow.steps:
            step_name = _step_name(step)
            try:
                current = step(current)
            except SelectionCancelled as exc:
                if exc.message:
                    self._reporter.info(exc.message)
                LOGGER.info("workflow cancelled workflow=%s step=%s", workflow.name, step_name)
                return WorkflowResult(workflow.name, WorkflowStatus.CANCELLED, message=exc.message)
            except KubepickError as exc:
                message = str(exc)
                self._reporter.error(message)
                LOGGER.warning(
                    "workflow failed workflow=%s step=%s error=%s",
                    workflow.name,
                    step_name,
                    message,
                )
                return WorkflowResult(workflow.name, WorkflowStatus.FAILED, message=message)
            LOGGER.debug("step finished workflow=%s step=%s", workflow.name, step_name)

        LOGGER.info("workflow completed workflow=%s", workflow.name)
        return WorkflowResult(workflow.name, WorkflowStatus.COMPLETED, context=current)

    # Steps.

    def _select_context(self, context: PipelineContext) -> PipelineContext:
        contexts = self._lister.list_contexts()
        selected = self._choose("Select Kubernetes Context", contexts)
        self._switch_context(selected)
        return context.capture(cluster_context=selected)

    def _select_crd(self, context: PipelineContext) -> PipelineContext:
        crds = self._lister.list_crds()
        return context.capture(crd=self._choose("Select CRD", crds))

    def _select_cr_instance(self, context: PipelineContext) -> PipelineContext:
        crd = _require(context.crd, "CRD")
        instances = self._lister.list_cr_instances(crd)
        return context.capture(instance=self._choose("Select CR Instance", instances))

    def _render_cr_detail(self, context: PipelineContext) -> PipelineContext:
        crd = _require(context.crd, "CRD")
        instance = _require(context.instance, "CR instance")
        detail = self._lister.fetch_cr_detail(crd, instance)
        sink = self._sink or ConsoleDocumentSink()
        document_name = actions.render_detail(sink, instance, detail)
        return context.capture(document_name=document_name)

    def _select_namespace_or_create(self, context: PipelineContext) -> PipelineContext:
        namespaces = self._lister.list_namespaces()
        selected = self._choose("Select Namespace", [CREATE_NAMESPACE_SENTINEL, *namespaces])
        if selected == CREATE_NAMESPACE_SENTINEL:
            new_name = self._picker.input_text("Enter Namespace Name")
            if new_name is None:
                raise SelectionCancelled()
            selected = actions.create_namespace(self._runner, new_name)
            self._reporter.success(f"Namespace {selected} created successfully.")
        return context.capture(namespace=selected)

    def _select_namespace_to_delete(self, context: PipelineContext) -> PipelineContext:
        namespaces = self._lister.list_namespaces()
        return context.capture(namespace=self._choose("Select Namespace to Delete", namespaces))

    def _confirm_delete(self, context: PipelineContext) -> PipelineContext:
        answer = self._picker.input_text(f"Delete namespace {context.namespace}? [y/N]")
        if not is_affirmative(answer):
            raise SelectionCancelled("Deletion cancelled.")
        return context

    def _delete_namespace(self, context: PipelineContext) -> PipelineContext:
        namespace = _require(context.namespace, "Namespace")
        actions.delete_namespace(self._runner, namespace)
        self._reporter.success(f"Namespace {namespace} successfully deleted.")
        return context

    def _resolve_manifest(self, document: ActiveDocument, context: PipelineContext) -> PipelineContext:
        return context.capture(manifest_path=document.require_file())

    def _apply_manifest(self, context: PipelineContext) -> PipelineContext:
        manifest_path = _require(context.manifest_path, "Manifest")
        namespace = _require(context.namespace, "Namespace")
        output = actions.apply_manifest(self._runner, manifest_path, namespace)
        self._reporter.success(f"kubectl apply successful: \n{output}")
        return context

    # Helpers.

    def _choose(self, prompt: str, candidates: Sequence[str]) -> str:
        selected = self._picker.select_one(prompt, candidates)
        if selected is None:
            raise SelectionCancelled()
        return selected

    def _switch_context(self, name: str) -> None:
        result = self._runner.run(commands.use_context(name))
        if result.ok:
            LOGGER.info("context switched context=%s", name)
            return
        if self._strict_context_switch:
            raise ContextSwitchError(
                f"Failed to switch to context {name}: {result.error or 'Unknown error'}"
            )
        LOGGER.warning(
            "context switch failed; continuing context=%s error=%s",
            name,
            result.error,
        )
