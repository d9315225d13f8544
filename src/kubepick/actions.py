"""Terminal actions run at the end of a resolved selection chain."""

from __future__ import annotations

import logging
from pathlib import Path

from kubepick import commands
from kubepick.documents import DocumentSink
from kubepick.errors import ActionError
from kubepick.runner import ProcessRunner

LOGGER = logging.getLogger("kubepick.actions")

DETAIL_CONTENT_TYPE = "yaml"
DETAIL_EXTENSION = ".yaml"


def apply_manifest(runner: ProcessRunner, path: Path, namespace: str) -> str:
    """Apply ``path`` into ``namespace``; kubectl must report what it changed."""
    result = runner.run(commands.apply_manifest(path, namespace))
    if result.ok and result.output.strip():
        LOGGER.info("manifest applied path=%s namespace=%s", path, namespace)
        return result.output.strip()
    raise ActionError(f"kubectl apply failed: {result.error or 'Unknown error'}")


def create_namespace(runner: ProcessRunner, name: str) -> str:
    command = commands.create_namespace(name)
    created = command.args[-1]
    result = runner.run(command)
    if not result.ok:
        raise ActionError(f"Failed to create namespace: {result.error or 'Unknown error'}")
    LOGGER.info("namespace created namespace=%s", created)
    return created


def delete_namespace(runner: ProcessRunner, name: str) -> str:
    result = runner.run(commands.delete_namespace(name))
    if not result.ok:
        raise ActionError(
            f"Failed to delete namespace {name}: {result.error or 'Unknown error'}"
        )
    LOGGER.info("namespace deleted namespace=%s", name)
    return result.output.strip()


def detail_document_name(instance: str) -> str:
    return f"{instance}{DETAIL_EXTENSION}"


def render_detail(sink: DocumentSink, instance: str, detail: str) -> str:
    name = detail_document_name(instance)
    sink.create_document(name, DETAIL_CONTENT_TYPE, detail.splitlines())
    return name
