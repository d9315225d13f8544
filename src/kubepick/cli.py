"""Main CLI entry point for kubepick."""

from __future__ import annotations

from pathlib import Path

import click

from kubepick import __version__
from kubepick.config import LOG_LEVELS, KubepickSettings, load_settings
from kubepick.documents import ActiveDocument, ConsoleDocumentSink, DocumentSink, FileDocumentSink
from kubepick.logging_config import configure_logging
from kubepick.picker import ConsolePicker
from kubepick.pipeline import SelectionPipeline, WorkflowResult, WorkflowStatus
from kubepick.reporting import ConsoleReporter
from kubepick.runner import KubectlRunner


def build_pipeline(settings: KubepickSettings, sink: DocumentSink | None = None) -> SelectionPipeline:
    runner = KubectlRunner(
        binary=settings.kubectl_binary,
        kubeconfig=settings.kubeconfig,
        timeout_seconds=settings.command_timeout_seconds,
    )
    return SelectionPipeline(
        runner=runner,
        picker=ConsolePicker(),
        reporter=ConsoleReporter(),
        sink=sink,
        strict_context_switch=settings.strict_context_switch,
    )


def _finish(result: WorkflowResult) -> None:
    if result.status is WorkflowStatus.FAILED:
        click.get_current_context().exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("--kubectl", "kubectl_binary", default=None, help="kubectl executable to run.")
@click.option(
    "--kubeconfig",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="kubeconfig file passed to kubectl.",
)
@click.option(
    "--log-level",
    type=click.Choice(sorted(LOG_LEVELS), case_sensitive=False),
    default=None,
    help="Console log level.",
)
@click.option(
    "--strict-context-switch/--best-effort-context-switch",
    default=None,
    help="Abort when switching the kubectl context fails.",
)
@click.pass_context
def main(
    ctx: click.Context,
    kubectl_binary: str | None,
    kubeconfig: Path | None,
    log_level: str | None,
    strict_context_switch: bool | None,
) -> None:
    """kubepick - drill down through kubectl resources and act on the selection."""
    try:
        settings = load_settings(
            kubectl_binary=kubectl_binary,
            kubeconfig=kubeconfig,
            log_level=log_level,
            strict_context_switch=strict_context_switch,
        )
    except ValueError as exc:
        raise click.UsageError(f"Invalid configuration: {exc}") from exc

    configure_logging(settings)
    ctx.obj = settings


@main.command()
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Write the resource YAML here instead of printing it.",
)
@click.pass_obj
def browse(settings: KubepickSettings, output_dir: Path | None) -> None:
    """Pick a context, CRD and instance, then show its YAML."""
    target_dir = output_dir or settings.document_dir
    sink: DocumentSink
    if target_dir is not None:
        sink = FileDocumentSink(target_dir, editor=settings.editor)
    else:
        sink = ConsoleDocumentSink()
    _finish(build_pipeline(settings, sink).browse_custom_resource())


@main.command(name="context")
@click.pass_obj
def switch_context(settings: KubepickSettings) -> None:
    """Pick and switch the active kubectl context."""
    _finish(build_pipeline(settings).select_context(then=click.echo))


@main.command()
@click.pass_obj
def namespace(settings: KubepickSettings) -> None:
    """Pick a namespace, or create a new one, and print its name."""
    _finish(build_pipeline(settings).select_namespace(then=click.echo))


@main.command()
@click.argument("manifest", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
def apply(settings: KubepickSettings, manifest: Path | None) -> None:
    """Apply MANIFEST into a picked context and namespace."""
    _finish(build_pipeline(settings).apply_from_document(ActiveDocument(manifest)))


@main.command(name="delete-namespace")
@click.option(
    "--current-context",
    is_flag=True,
    default=False,
    help="Skip the context picker and use the active context.",
)
@click.pass_obj
def delete_namespace(settings: KubepickSettings, current_context: bool) -> None:
    """Pick a namespace and delete it after confirmation."""
    pipeline = build_pipeline(settings)
    if current_context:
        result = pipeline.delete_namespace_in_current_context()
    else:
        result = pipeline.delete_namespace()
    _finish(result)


if __name__ == "__main__":
    main()
