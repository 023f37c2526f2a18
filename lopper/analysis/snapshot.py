"""Build per-file usage snapshots from front-end import bindings."""

from __future__ import annotations

from typing import Iterable, Sequence

from lopper.analysis.attribution import DependencyMapper
from lopper.analysis.usage import count_usage
from lopper.models import FileUsageSnapshot, ImportBinding, ResolvedImport


def build_snapshot(
    path: str,
    text: str,
    bindings: Sequence[ImportBinding],
    mapper: DependencyMapper,
    local_prefixes: Iterable[str] = (),
) -> FileUsageSnapshot:
    """Attribute each binding and count alias usage for one file.

    Bindings the attribution pre-filter drops (stdlib, local) do not reach
    the snapshot at all.
    """
    local_prefixes = tuple(local_prefixes)
    resolved: list[ResolvedImport] = []
    for binding in bindings:
        attribution = mapper.resolve(binding.module, local_prefixes)
        if attribution.filtered:
            continue
        resolved.append(ResolvedImport(binding=binding, attribution=attribution))

    return FileUsageSnapshot(
        path=path,
        text=text,
        imports=resolved,
        usage=count_usage(text, [item.binding for item in resolved]),
    )


def list_dependencies(
    snapshots: Iterable[FileUsageSnapshot],
    declared: Iterable[str] = (),
) -> list[str]:
    """Sorted union of declared ids and every attributed dependency id."""
    found = {dep for dep in declared if dep}
    for snapshot in snapshots:
        for item in snapshot.imports:
            found.add(item.attribution.dependency_id)
    return sorted(found)
