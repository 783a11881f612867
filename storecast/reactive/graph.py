"""
graph.py
--------
Explicit reactive dependency graph.

Input nodes hold raw values (the dataset, one node per Selection field).
Derived nodes declare the names of the nodes they read and a compute
function that receives those values as keyword arguments:

    graph.add_input("store_id", "1")
    graph.add_node("series", ("records", "store_id"), filter_series)

Changing an input marks every transitive dependent dirty and bumps the
generation counter. recompute() then evaluates the dirty nodes in
topological order, each one in full. Nothing is memoized between passes:
a dirty node is always recomputed, even if it ends up with the same inputs
as an earlier pass.

A pass is tagged with the generation it started from. If an input changes
while the pass is running (a slow oracle call, say), the pass stops and
nothing computed from the old snapshot is committed; the affected nodes stay
dirty for the next pass.

Recoverable forecasting errors (StorecastError) are stored as the node's
state and handed down to every dependent, so a single "insufficient data"
shows up everywhere it applies. Any other exception propagates.
"""

from __future__ import annotations
import logging
import threading
from dataclasses import dataclass
from graphlib import TopologicalSorter
from typing import Any, Callable

from storecast.core.errors import StorecastError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeState:
    value: Any = None
    error: StorecastError | None = None
    dirty: bool = True
    generation: int = -1

    @property
    def ok(self) -> bool:
        return not self.dirty and self.error is None


def _same(a: Any, b: Any) -> bool:
    if a is b:
        return True
    try:
        return bool(a == b)
    except (TypeError, ValueError):
        # pandas/numpy objects compare elementwise
        return False


class DependencyGraph:
    def __init__(self) -> None:
        self._inputs: dict[str, Any] = {}
        self._nodes: dict[str, tuple[tuple[str, ...], Callable[..., Any]]] = {}
        self._dependents: dict[str, set[str]] = {}
        self._states: dict[str, NodeState] = {}
        self._order: list[str] | None = None
        self._generation = 0
        self._lock = threading.RLock()

    # ── Declaration ───────────────────────────────────────────────────────────

    def add_input(self, name: str, value: Any = None) -> None:
        self._check_new(name)
        self._inputs[name] = value
        self._dependents[name] = set()

    def add_node(self, name: str, inputs: tuple[str, ...], compute: Callable[..., Any]) -> None:
        """Declare a derived node. Its inputs must already be declared, which keeps the graph acyclic."""
        self._check_new(name)
        missing = [i for i in inputs if i not in self._dependents]
        if missing:
            raise KeyError(f"Node {name!r} depends on undeclared node(s): {missing}")
        self._nodes[name] = (tuple(inputs), compute)
        self._dependents[name] = set()
        for i in inputs:
            self._dependents[i].add(name)
        self._states[name] = NodeState()
        self._order = None

    def _check_new(self, name: str) -> None:
        if name in self._dependents:
            raise KeyError(f"Node {name!r} already declared")

    @property
    def order(self) -> list[str]:
        """Derived nodes in topological order."""
        if self._order is None:
            sorter = TopologicalSorter({n: set(deps) for n, (deps, _) in self._nodes.items()})
            self._order = [n for n in sorter.static_order() if n in self._nodes]
        return self._order

    # ── Inputs ────────────────────────────────────────────────────────────────

    @property
    def generation(self) -> int:
        return self._generation

    def set_input(self, name: str, value: Any) -> bool:
        """Replace an input value. Returns False (and invalidates nothing) if it is unchanged."""
        with self._lock:
            if name not in self._inputs:
                raise KeyError(f"Unknown input {name!r}")
            if _same(self._inputs[name], value):
                return False
            self._inputs[name] = value
            self._generation += 1
            stale = self.descendants(name)
            for node in stale:
                self._states[node] = NodeState(dirty=True)
            logger.debug(f"Input {name!r} changed (generation {self._generation}); {len(stale)} node(s) dirty")
            return True

    def descendants(self, name: str) -> set[str]:
        seen: set[str] = set()
        stack = list(self._dependents[name])
        while stack:
            node = stack.pop()
            if node not in seen:
                seen.add(node)
                stack.extend(self._dependents[node])
        return seen

    # ── Evaluation ────────────────────────────────────────────────────────────

    def recompute(self) -> bool:
        """
        Recompute every dirty node in topological order.

        Returns True if the pass completed, False if it was abandoned because
        an input changed while it was running.
        """
        with self._lock:
            generation = self._generation
            pending = [n for n in self.order if self._states[n].dirty]
        if pending:
            logger.debug(f"Recomputing {pending} (generation {generation})")

        for name in pending:
            deps, compute = self._nodes[name]
            with self._lock:
                if self._generation != generation:
                    logger.info(f"Selection changed during recompute; abandoning pass at {name!r}")
                    return False
                args, upstream_error = self._resolve(deps)

            if upstream_error is not None:
                state = NodeState(error=upstream_error, dirty=False, generation=generation)
            else:
                try:
                    state = NodeState(value=compute(**args), dirty=False, generation=generation)
                except StorecastError as e:
                    logger.info(f"{name}: {type(e).__name__}: {e}")
                    state = NodeState(error=e, dirty=False, generation=generation)

            with self._lock:
                if self._generation != generation:
                    logger.info(f"Discarding stale result for {name!r} (generation {generation} → {self._generation})")
                    return False
                self._states[name] = state
        return True

    def _resolve(self, deps: tuple[str, ...]) -> tuple[dict[str, Any], StorecastError | None]:
        args = {}
        for dep in deps:
            if dep in self._inputs:
                args[dep] = self._inputs[dep]
                continue
            state = self._states[dep]
            if state.error is not None:
                return {}, state.error
            args[dep] = state.value
        return args, None

    # ── Access ────────────────────────────────────────────────────────────────

    def state(self, name: str) -> NodeState:
        if name in self._inputs:
            return NodeState(value=self._inputs[name], dirty=False, generation=self._generation)
        return self._states[name]

    def get(self, name: str) -> Any:
        """Value of a node; re-raises its stored error."""
        state = self.state(name)
        if state.dirty:
            raise RuntimeError(f"Node {name!r} is dirty; call recompute() first")
        if state.error is not None:
            raise state.error
        return state.value
