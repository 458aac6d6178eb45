"""Property-based tests for buildtime_profiler using Hypothesis.

These tests verify the timing laws and ordering/pruning invariants for
arbitrary inputs: exact durations, last-start-wins, phase sums, lifecycle
ordering idempotence, pruning idempotence and concurrent disjoint keys.
"""

import copy
import threading

from helpers import FakeClock, mojo
from hypothesis import given, settings
from hypothesis import strategies as st

from buildtime_profiler import (
    CANONICAL_PHASES,
    DiscoveredPhases,
    ExecutionEvent,
    ExecutionEventType,
    KeyedTimer,
    ModuleKey,
    PhaseGoalTimer,
    SizeKeyedTimer,
    order_phases,
    prune_fields,
)

# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

# Durations in milliseconds
durations = st.integers(min_value=0, max_value=10**9)

# Instants for the fake clock
instants = st.integers(min_value=0, max_value=10**12)

keys = st.text(min_size=1, max_size=20)

canonical_subsets = st.lists(st.sampled_from(CANONICAL_PHASES), unique=True)

# Custom phase names never collide with canonical ones
custom_phases = st.lists(
    st.text(alphabet="xyz_", min_size=1, max_size=8).map(lambda s: f"custom-{s}"),
    unique=True,
    max_size=6,
)

modules = st.sampled_from(
    [ModuleKey("org.example", name, "1.0") for name in ("core", "api", "web", "cli")]
)

goal_runs = st.lists(
    st.tuples(modules, st.sampled_from(["compile", "test", "package", "verify"]), durations),
    min_size=1,
    max_size=30,
)

# Nested JSON-like documents; keys drawn from "abc" so "z" paths never resolve
doc_keys = st.text(alphabet="abc", min_size=1, max_size=2)
leaves = st.integers() | st.text(max_size=5) | st.none() | st.booleans()
documents = st.dictionaries(
    doc_keys,
    st.recursive(leaves, lambda children: st.dictionaries(doc_keys, children, max_size=4), max_leaves=15),
    max_size=4,
)
# Path segments may be empty ("a.", "a..b"); documents never hold the empty key
path_segments = st.text(alphabet="abc", max_size=2)
paths = st.lists(path_segments, min_size=1, max_size=3).map(".".join)


# ---------------------------------------------------------------------------
# KeyedTimer laws
# ---------------------------------------------------------------------------

class TestKeyedTimerProperties:
    @given(start=instants, duration=durations, key=keys)
    def test_elapsed_equals_stop_minus_start(self, start, duration, key):
        clock = FakeClock(start)
        timer = KeyedTimer[str](clock)
        timer.start(key)
        clock.advance(duration)
        timer.stop(key)

        [(_, span)] = timer.entries()
        assert timer.elapsed(key) == duration == span.stop_instant - span.start_instant

    @given(key=keys)
    def test_stop_without_start_never_raises(self, key):
        timer = KeyedTimer[str](FakeClock())
        assert timer.stop(key) is False
        assert timer.elapsed(key) is None

    @given(first=durations, second=durations, key=keys)
    def test_last_start_wins(self, first, second, key):
        clock = FakeClock()
        timer = KeyedTimer[str](clock)
        timer.start(key)
        clock.advance(first)
        timer.start(key)
        clock.advance(second)
        timer.stop(key)
        assert timer.elapsed(key) == second

    @given(records=st.lists(st.tuples(keys, st.integers(min_value=0, max_value=10**9)), max_size=20))
    def test_total_size_is_sum_of_last_size_per_key(self, records):
        timer = SizeKeyedTimer[str](FakeClock())
        last: dict[str, int] = {}
        for key, size in records:
            timer.start(key)
            timer.stop(key, size)
            last[key] = size
        assert timer.total_size() == sum(last.values())
        assert len(timer) == len(last)


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------

class TestConcurrencyProperties:
    @given(n=st.integers(min_value=2, max_value=16), rounds=st.integers(min_value=1, max_value=20))
    @settings(max_examples=20, deadline=None)
    def test_disjoint_keys_are_never_lost(self, n, rounds):
        timer = SizeKeyedTimer[str]()
        barrier = threading.Barrier(n)

        def worker(i: int) -> None:
            barrier.wait()
            for r in range(rounds):
                key = f"module-{i}-goal-{r}"
                timer.start(key)
                timer.stop(key, i)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(n)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(timer) == n * rounds
        assert timer.total_size() == rounds * sum(range(n))
        assert all(span.elapsed_millis() >= 0 for _, span in timer.entries())

    @given(phases=st.lists(st.sampled_from(CANONICAL_PHASES), min_size=1, max_size=60))
    @settings(max_examples=20, deadline=None)
    def test_concurrent_phase_discovery_is_duplicate_free(self, phases):
        discovered = DiscoveredPhases()
        threads = [
            threading.Thread(target=lambda: [discovered.add(p) for p in phases]) for _ in range(4)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        snapshot = discovered.snapshot()
        assert len(snapshot) == len(set(snapshot)) == len(set(phases))


# ---------------------------------------------------------------------------
# PhaseOrderer
# ---------------------------------------------------------------------------

class TestPhaseOrderingProperties:
    @given(subset=canonical_subsets)
    def test_canonical_order_is_unchanged(self, subset):
        ordered = sorted(subset, key=CANONICAL_PHASES.index)
        assert order_phases(ordered) == ordered

    @given(phases=custom_phases)
    def test_unknown_phases_keep_first_seen_order(self, phases):
        assert order_phases(phases) == phases

    @given(subset=canonical_subsets, custom=custom_phases, data=st.data())
    def test_reordering_is_idempotent_and_loses_nothing(self, subset, custom, data):
        mixed = data.draw(st.permutations(subset + custom))
        once = order_phases(mixed)
        assert order_phases(once) == once
        assert sorted(once) == sorted(mixed)
        assert once[len(subset):] == [p for p in mixed if p in custom]

    @given(subset=canonical_subsets, data=st.data())
    def test_discovered_phases_reorder(self, subset, data):
        discovered = DiscoveredPhases()
        for phase in data.draw(st.permutations(subset)):
            discovered.add(phase)
        assert discovered.reorder() == sorted(subset, key=CANONICAL_PHASES.index)


# ---------------------------------------------------------------------------
# PhaseGoalTimer aggregation
# ---------------------------------------------------------------------------

class TestPhaseAggregationProperties:
    @given(runs=goal_runs)
    def test_phase_time_is_sum_over_modules(self, runs):
        clock = FakeClock()
        timer = PhaseGoalTimer(DiscoveredPhases(), clock)
        for i, (module, phase, duration) in enumerate(runs):
            execution = mojo(f"goal-{i}", phase)
            timer.mojo_start(ExecutionEvent(ExecutionEventType.MOJO_STARTED, project=module, mojo=execution))
            clock.advance(duration)
            timer.mojo_stop(ExecutionEvent(ExecutionEventType.MOJO_SUCCEEDED, project=module, mojo=execution))

        for phase in {phase for _, phase, _ in runs}:
            recorded = {module for module, p, _ in runs if p == phase}
            assert timer.time_for_phase(phase) == sum(
                timer.time_for_module_and_phase(module, phase) for module in recorded
            )
            assert timer.time_for_phase(phase) == sum(d for _, p, d in runs if p == phase)


# ---------------------------------------------------------------------------
# Field pruning
# ---------------------------------------------------------------------------

class TestPruningProperties:
    @given(document=documents, path=paths)
    def test_pruning_is_idempotent(self, document, path):
        once = prune_fields(document, [path])
        assert prune_fields(once, [path]) == once
        assert prune_fields(document, [path, path]) == once

    @given(document=documents, path=paths)
    def test_pruning_never_mutates_input(self, document, path):
        original = copy.deepcopy(document)
        prune_fields(document, [path])
        assert document == original

    @given(document=documents, prefix=st.lists(doc_keys, max_size=2))
    def test_non_existent_path_is_noop(self, document, prefix):
        path = ".".join(prefix + ["zz"])
        assert prune_fields(document, [path]) == document

    @given(document=documents, path=paths)
    def test_path_with_empty_segment_is_noop(self, document, path):
        if "" not in path.split("."):
            path = path + "."
        assert prune_fields(document, [path]) == document
