"""Turns kubectl listing output into candidate lists."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

from kubepick import commands
from kubepick.commands import KubectlCommand
from kubepick.errors import ResourceListingError
from kubepick.runner import ProcessRunner

LOGGER = logging.getLogger("kubepick.lister")


class ResourceKind(Enum):
    CONTEXT = "Kubernetes contexts"
    NAMESPACE = "namespaces"
    CRD = "CRDs"
    CR_INSTANCE = "CR instances"
    CR_DETAIL = "CR details"

    @property
    def label(self) -> str:
        return self.value


def split_lines(raw: str) -> list[str]:
    return [line.strip() for line in raw.splitlines() if line.strip()]


def parse_name_output(raw: str) -> list[str]:
    return split_lines(raw)


def parse_namespace_table(raw: str) -> list[str]:
    """Drop the header row and keep the first column of each remaining row."""
    rows = raw.splitlines()[1:]
    names: list[str] = []
    for row in rows:
        columns = row.split()
        if columns:
            names.append(columns[0])
    return names


def strip_resource_prefix(name: str) -> str:
    """`<kind>.<group>/<name>` -> `<name>`; plain names pass through."""
    _, separator, bare = name.rpartition("/")
    if separator and bare:
        return bare
    return name


def _parse_resource_names(raw: str) -> list[str]:
    return [strip_resource_prefix(line) for line in split_lines(raw)]


class ResourceLister:
    def __init__(self, runner: ProcessRunner) -> None:
        self._runner = runner

    def list_contexts(self) -> list[str]:
        return self._list(ResourceKind.CONTEXT, commands.get_contexts(), parse_name_output)

    def list_namespaces(self) -> list[str]:
        return self._list(ResourceKind.NAMESPACE, commands.get_namespaces(), parse_namespace_table)

    def list_crds(self) -> list[str]:
        return self._list(ResourceKind.CRD, commands.get_crds(), _parse_resource_names)

    def list_cr_instances(self, crd: str) -> list[str]:
        return self._list(
            ResourceKind.CR_INSTANCE,
            commands.get_cr_instances(crd),
            _parse_resource_names,
        )

    def fetch_cr_detail(self, crd: str, instance: str) -> str:
        kind = ResourceKind.CR_DETAIL
        output = self._fetch(kind, commands.get_cr_detail(crd, instance))
        LOGGER.debug("fetched detail crd=%s instance=%s bytes=%s", crd, instance, len(output))
        return output

    def _list(
        self,
        kind: ResourceKind,
        command: KubectlCommand,
        parse: Callable[[str], list[str]],
    ) -> list[str]:
        output = self._fetch(kind, command)
        candidates = [candidate for candidate in parse(output) if candidate.strip()]
        if not candidates:
            raise ResourceListingError(kind.label, f"no {kind.label} available")
        LOGGER.debug("listed resources kind=%s count=%s", kind.name, len(candidates))
        return candidates

    def _fetch(self, kind: ResourceKind, command: KubectlCommand) -> str:
        result = self._runner.run(command)
        if not result.ok:
            raise ResourceListingError(kind.label, result.error or "unknown error")
        if not result.output.strip():
            raise ResourceListingError(kind.label, "command returned no output")
        return result.output
