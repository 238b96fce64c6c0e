"""
engine/
-------
Replay, playback & editing layer.

    from engine import Runner, Workspace, Recorder, compare
"""

from engine.replay    import ReplayState, replay, confirmed_path_edges, edge_overlay
from engine.runner    import Runner, RunnerState, RunnerMode, SPEED_PRESETS
from engine.recorder  import Recorder, RunMetrics, ComparisonResult, compare
from engine.workspace import Workspace

__all__ = [
    "ReplayState",
    "replay",
    "confirmed_path_edges",
    "edge_overlay",
    "Runner",
    "RunnerState",
    "RunnerMode",
    "SPEED_PRESETS",
    "Recorder",
    "RunMetrics",
    "ComparisonResult",
    "compare",
    "Workspace",
]
