"""
runner.py - Step Replay State Machine
=====================================
The Runner is the ONLY object the UI drives during a run.  It owns the
step log for one (graph, source, algorithm) triple and exposes
play / pause / step / back / forward / seek / reset over it.

State machine:
    IDLE       ->  play()                  ->  RUNNING
    IDLE       ->  step() / forward_step()  ->  PAUSED
    RUNNING    ->  play() / pause()         ->  PAUSED
    PAUSED     ->  play() / resume()        ->  RUNNING
    RUNNING    ->  (last step applied)      ->  COMPLETED
    COMPLETED  ->  back_step() / seek()     ->  PAUSED
    COMPLETED  ->  play()                   ->  RUNNING from step 0
    any        ->  reset()                  ->  IDLE

Mode is orthogonal: EXPLORE steps through the log, VIEW jumps straight to
the final answer and refuses to step.

Timing:
  There is no thread.  play() arms a deadline; the host calls tick(now)
  from its own loop and at most one step is applied per due tick.
  pause(), reset() and every configuration change disarm it, so there is
  never more than one pending playback loop per runner.

Derived state (distances, visited set, overlay, ...) is recomputed from
the step log by engine.replay on every move, never patched incrementally.
"""

import logging
import time
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple, Union

from algorithms import generate_steps as run_algorithm
from algorithms.bellman_ford import cycle_violations
from algorithms.step import HeapEntry, ShortestPathResult, Step
from engine.replay import ReplayState, clamp, next_significant, replay, state_to_dict
from graph import DIJKSTRA, EdgeStatus, Graph, check_algorithm

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class RunnerState(Enum):
    IDLE      = "idle"
    RUNNING   = "running"
    PAUSED    = "paused"
    COMPLETED = "completed"


class RunnerMode(Enum):
    EXPLORE = "explore"
    VIEW    = "view"


# ---------------------------------------------------------------------------
# Speed presets (seconds per step)
# ---------------------------------------------------------------------------
SPEED_PRESETS = {
    "slow":   1.8,    # teaching mode
    "medium": 1.0,
    "fast":   0.6,
    "turbo":  0.2,    # demo mode
}
MIN_SPEED = 0.05

VIEW_MODE_MESSAGE = "In View mode. Switch to Explore mode to step through the algorithm."
END_MESSAGE       = "Reached the end of the algorithm execution."


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------
class Runner:
    """
    Attributes:
        graph        : The caller's graph.  Only read; steps run on a copy.
        source       : Source node id (None until chosen).
        destination  : Optional node id whose path view mode highlights.
        algorithm    : Registry key.
        state        : RunnerState.
        mode         : RunnerMode.
        speed        : Seconds between auto-advance ticks.
        steps        : Full step log (empty until generated).
        result       : ShortestPathResult of the current log.
    """

    def __init__(
        self,
        algorithm: str = DIJKSTRA,
        speed: float = SPEED_PRESETS["medium"],
        clock: Callable[[], float] = time.monotonic,
    ):
        self.graph:       Optional[Graph]              = None
        self.source:      Optional[int]                = None
        self.destination: Optional[int]                = None
        self.algorithm:   str                          = check_algorithm(algorithm)
        self.state:       RunnerState                  = RunnerState.IDLE
        self.mode:        RunnerMode                   = RunnerMode.EXPLORE
        self.speed:       float                        = max(MIN_SPEED, speed)
        self.steps:       List[Step]                   = []
        self.result:      Optional[ShortestPathResult] = None

        self._clock:    Callable[[], float]   = clock
        self._count:    int                   = 0
        self._deadline: Optional[float]       = None
        self._message:  str                   = ""
        self._view:     ReplayState           = ReplayState()

    # ------------------------------------------------------------------
    # Configuration - every change throws the log away
    # ------------------------------------------------------------------
    def bind(self, graph: Optional[Graph], source: Optional[int]) -> None:
        self.graph  = graph
        self.source = source
        self.reset()

    def set_algorithm(self, algorithm: str) -> None:
        self.algorithm = check_algorithm(algorithm)
        self.reset()

    def set_source(self, source: Optional[int]) -> None:
        self.source = source
        self.reset()

    def set_destination(self, destination: Optional[int]) -> None:
        self.destination = destination
        self.reset()

    def set_speed(self, speed: Union[str, float]) -> None:
        """Preset name or seconds per step.  Does not reset."""
        if isinstance(speed, str):
            if speed not in SPEED_PRESETS:
                raise ValueError(f"Unknown speed preset: {speed}")
            self.speed = SPEED_PRESETS[speed]
        else:
            self.speed = max(MIN_SPEED, float(speed))

    def set_mode(self, mode: Union[str, RunnerMode]) -> None:
        mode = RunnerMode(mode)
        if mode == self.mode:
            return
        if mode == RunnerMode.VIEW:
            self._ensure_steps()
            self.mode = mode
            self._show_answer()
        else:
            self.mode = mode
            self.reset()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def generate_steps(self) -> List[Step]:
        """Run the algorithm on a snapshot of the graph.  Replaces any existing log."""
        if self.graph is None:
            raise ValueError("No graph to run on.")
        if self.source is None:
            raise ValueError("Select a source node first.")
        results: List[ShortestPathResult] = []
        self.steps, _ = run_algorithm(self.algorithm, self.graph.copy(), self.source, results.append)
        self.result = results[0]
        self._count = 0
        self._refresh()
        log.debug("generated %d %s steps", len(self.steps), self.algorithm)
        return self.steps

    def reset(self) -> None:
        """
        Back to IDLE with no log; the next play() or step() regenerates.
        In view mode the answer is recomputed straight away.
        """
        self.steps     = []
        self.result    = None
        self.state     = RunnerState.IDLE
        self._count    = 0
        self._deadline = None
        self._message  = ""
        self._refresh()
        if self.mode == RunnerMode.VIEW and self.graph is not None and self.source is not None:
            self._show_answer()

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def play(self, now: Optional[float] = None) -> None:
        if self._refuse_in_view():
            return
        if self.state == RunnerState.RUNNING:
            self.pause()
            return
        if self.state == RunnerState.COMPLETED:
            self._goto(0)
        self._ensure_steps()
        self._set_state(RunnerState.RUNNING)
        self._arm(now)

    def pause(self) -> None:
        if self.state == RunnerState.RUNNING:
            self._set_state(RunnerState.PAUSED)
        self._deadline = None

    def resume(self, now: Optional[float] = None) -> None:
        if self.state == RunnerState.PAUSED and self.mode == RunnerMode.EXPLORE:
            self._set_state(RunnerState.RUNNING)
            self._arm(now)

    # ------------------------------------------------------------------
    # Tick  (call this from your event loop / timer)
    # ------------------------------------------------------------------
    def tick(self, now: Optional[float] = None) -> bool:
        """
        Call periodically.  If running and the deadline has passed,
        applies one step and re-arms.  Returns True if a step was taken.
        """
        if self.state != RunnerState.RUNNING or self._deadline is None:
            return False
        now = self._clock() if now is None else now
        if now < self._deadline:
            return False
        self._goto(self._count + 1)
        if self.state == RunnerState.RUNNING:
            self._deadline = now + self.speed
        return True

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def step(self) -> bool:
        """Apply the next step.  False (and no change) past the end."""
        if self._refuse_in_view():
            return False
        self._ensure_steps()
        if self._count >= len(self.steps):
            return False
        self._manual()
        self._goto(self._count + 1)
        return True

    def back_step(self) -> bool:
        """Un-apply the last step.  Derived state is rebuilt from scratch."""
        if self._refuse_in_view():
            return False
        if self._count <= 0:
            return False
        self._manual()
        self._goto(self._count - 1)
        return True

    def forward_step(self) -> bool:
        """Skip to just past the next step that visits a node, confirms an edge or finds a cycle."""
        if self._refuse_in_view():
            return False
        self._ensure_steps()
        if self._count >= len(self.steps):
            return False
        self._manual()
        idx = next_significant(self.steps, self._count, len(self._view.visited_nodes))
        if idx is None:
            self._goto(len(self.steps))
            self._message = END_MESSAGE
        else:
            self._goto(idx + 1)
        return True

    def seek(self, count: int) -> int:
        """Jump so that `count` steps are applied.  Out-of-range values clamp."""
        if self._refuse_in_view():
            return self._count
        self._ensure_steps()
        self._manual()
        self._goto(clamp(count, len(self.steps)))
        return self._count

    # ------------------------------------------------------------------
    # Read-only observables
    # ------------------------------------------------------------------
    @property
    def current_step(self) -> int:
        return self._count

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    @property
    def replay_state(self) -> ReplayState:
        return self._view

    @property
    def distance_array(self) -> Dict[int, float]:
        return self._view.distance_array

    @property
    def visited_nodes(self) -> FrozenSet[int]:
        return self._view.visited_nodes

    @property
    def min_heap(self) -> Tuple[HeapEntry, ...]:
        return self._view.min_heap

    @property
    def iteration_count(self) -> int:
        return self._view.iteration_count

    @property
    def negative_cycle_detected(self) -> bool:
        return self._view.negative_cycle_detected

    @property
    def current_algorithm_step(self) -> str:
        return self._view.algorithm_step

    @property
    def explanation(self) -> str:
        return self._message or self._view.explanation

    @property
    def confirmed_path_edges(self) -> FrozenSet[str]:
        return self._view.confirmed_edges

    @property
    def edge_updates(self) -> Dict[str, EdgeStatus]:
        """Status overlay the UI applies to its own copies of the edges."""
        if self.mode == RunnerMode.VIEW and self.result is not None:
            return self._answer_overlay()
        return self._view.edge_overlay

    @property
    def is_running(self) -> bool:
        return self.state == RunnerState.RUNNING

    @property
    def is_completed(self) -> bool:
        return self.state == RunnerState.COMPLETED

    def to_dict(self) -> dict:
        data = state_to_dict(self._view)
        data.update({
            "state":       self.state.value,
            "mode":        self.mode.value,
            "algorithm":   self.algorithm,
            "source":      self.source,
            "destination": self.destination,
            "speed":       self.speed,
            "explanation": self.explanation,
            "edgeUpdates": [{"id": eid, "status": s.value} for eid, s in self.edge_updates.items()],
            "result":      self.result.to_dict() if self.result else None,
        })
        return data

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _show_answer(self) -> None:
        self._ensure_steps()
        self._deadline = None
        self._goto(len(self.steps))
        log.debug("view mode: jumped to final answer")

    def _ensure_steps(self) -> None:
        if not self.steps:
            self.generate_steps()

    def _edge_ids(self) -> List[str]:
        return list(self.graph.edges) if self.graph is not None else []

    def _refresh(self) -> None:
        self._view = replay(self.steps, self._count, self._edge_ids())

    def _goto(self, count: int) -> None:
        self._count   = clamp(count, len(self.steps))
        self._message = ""
        self._refresh()
        if self.steps and self._count >= len(self.steps):
            self._set_state(RunnerState.COMPLETED)
            self._deadline = None
        elif self.state == RunnerState.COMPLETED:
            self._set_state(RunnerState.PAUSED)

    def _manual(self) -> None:
        """Manual navigation stops auto-play; an idle runner becomes paused."""
        if self.state in (RunnerState.IDLE, RunnerState.RUNNING):
            self._set_state(RunnerState.PAUSED)
        self._deadline = None

    def _arm(self, now: Optional[float]) -> None:
        now = self._clock() if now is None else now
        self._deadline = now + self.speed

    def _set_state(self, state: RunnerState) -> None:
        if state != self.state:
            log.debug("runner %s -> %s at step %d/%d",
                      self.state.value, state.value, self._count, len(self.steps))
            self.state = state

    def _refuse_in_view(self) -> bool:
        if self.mode == RunnerMode.VIEW:
            self._message = VIEW_MODE_MESSAGE
            return True
        return False

    def _answer_overlay(self) -> Dict[str, EdgeStatus]:
        overlay = {eid: EdgeStatus.UNVISITED for eid in self._edge_ids()}
        if self.result.has_negative_cycle:
            marked = set(cycle_violations(self.graph, self.result))
            marked.update(e.id for e in self.graph.edges.values() if e.in_negative_cycle)
            status = EdgeStatus.NEGATIVE_CYCLE
        else:
            marked = set(self.result.path_edges(self.graph, self.destination))
            status = EdgeStatus.INCLUDED
        for eid in marked:
            if eid in overlay:
                overlay[eid] = status
        return overlay
