"""Typed builders for the kubectl invocations used by the selection pipelines."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from kubepick.errors import InvalidIdentifierError


@dataclass(frozen=True)
class KubectlCommand:
    args: tuple[str, ...]

    def argv(self, binary: str = "kubectl", kubeconfig: Path | None = None) -> list[str]:
        command = [binary]
        if kubeconfig is not None:
            command.append(f"--kubeconfig={kubeconfig}")
        command.extend(self.args)
        return command

    def describe(self) -> str:
        return " ".join(("kubectl", *self.args))


def _validate_identifier(value: str, label: str, *, allow_spaces: bool = False) -> str:
    if not isinstance(value, str):
        raise InvalidIdentifierError(label, str(value), "must be a string")
    normalized = value.strip()
    if not normalized:
        raise InvalidIdentifierError(label, value, "must not be empty")
    if any(not char.isprintable() for char in normalized):
        raise InvalidIdentifierError(label, value, "must not contain control characters")
    if not allow_spaces and any(char.isspace() for char in normalized):
        raise InvalidIdentifierError(label, value, "must not contain whitespace")
    if normalized.startswith("-"):
        raise InvalidIdentifierError(label, value, "must not start with '-'")
    return normalized


def get_contexts() -> KubectlCommand:
    return KubectlCommand(("config", "get-contexts", "-o", "name"))


def use_context(name: str) -> KubectlCommand:
    # kubeconfig allows spaces in context names; argv needs no quoting.
    context_name = _validate_identifier(name, "context", allow_spaces=True)
    return KubectlCommand(("config", "use-context", context_name))


def get_namespaces() -> KubectlCommand:
    # Tabular output; the caller drops the header row and keeps the first column.
    return KubectlCommand(("get", "namespaces"))


def get_crds() -> KubectlCommand:
    return KubectlCommand(("get", "crd", "-o", "name"))


def get_cr_instances(crd: str) -> KubectlCommand:
    crd_name = _validate_identifier(crd, "CRD")
    return KubectlCommand(("get", crd_name, "-o", "name"))


def get_cr_detail(crd: str, instance: str) -> KubectlCommand:
    crd_name = _validate_identifier(crd, "CRD")
    instance_name = _validate_identifier(instance, "CR instance")
    return KubectlCommand(("get", f"{crd_name}/{instance_name}", "-o", "yaml"))


def create_namespace(name: str) -> KubectlCommand:
    namespace = _validate_identifier(name, "namespace")
    return KubectlCommand(("create", "namespace", namespace))


def delete_namespace(name: str) -> KubectlCommand:
    namespace = _validate_identifier(name, "namespace")
    return KubectlCommand(("delete", "namespace", namespace))


def apply_manifest(path: Path | str, namespace: str) -> KubectlCommand:
    manifest_path = str(path)
    if not manifest_path.strip():
        raise InvalidIdentifierError("manifest path", manifest_path, "must not be empty")
    target_namespace = _validate_identifier(namespace, "namespace")
    return KubectlCommand(("apply", "-f", manifest_path, "-n", target_namespace))
