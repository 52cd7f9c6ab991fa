from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Protocol, Type, runtime_checkable


@dataclass(frozen=True)
class Artifact:
    """Document state handed from one pass to the next.

    ``payload`` is a mapping tagged by ``type`` (``"lines"``, then
    ``"blocks"``); ``meta`` carries run bookkeeping such as per-pass metrics.
    """

    payload: Any
    meta: Optional[Dict[str, Any]] = None

    @property
    def kind(self) -> Optional[str]:
        return self.payload.get("type") if isinstance(self.payload, Mapping) else None

    def with_metrics(self, pass_name: str, payload: Any, **metrics: Any) -> Artifact:
        """New artifact holding ``payload``, with ``metrics`` filed under ``pass_name``."""
        meta = dict(self.meta or {})
        recorded = dict(meta.get("metrics") or {})
        recorded[pass_name] = {**recorded.get(pass_name, {}), **metrics}
        meta["metrics"] = recorded
        return Artifact(payload=payload, meta=meta)


@runtime_checkable
class Pass(Protocol):
    name: str
    input_type: Type
    output_type: Type

    def __call__(self, a: Artifact) -> Artifact:
        """Execute the pass."""
        ...


_REGISTRY: Mapping[str, Pass] = MappingProxyType({})


def register(p: Pass) -> Pass:
    """Register ``p`` under its name, replacing any pass of the same name."""
    global _REGISTRY
    if not p.name:
        raise ValueError("a pass needs a name to be registered")
    _REGISTRY = MappingProxyType({**_REGISTRY, p.name: p})
    return p


def run_step(name: str, a: Artifact) -> Artifact:
    try:
        step = _REGISTRY[name]
    except KeyError:
        raise KeyError(f"no pass registered as {name!r}") from None
    return step(a)


def run_pipeline(steps: Iterable[str], a: Artifact) -> Artifact:
    """Apply the named steps to ``a`` in order."""
    return reduce(lambda acc, s: run_step(s, acc), steps, a)


def registry() -> Dict[str, Pass]:
    return dict(_REGISTRY)
