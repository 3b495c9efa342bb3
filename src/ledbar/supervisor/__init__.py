"""Process supervisor: preflight, pipeline runs, recovery and shutdown."""

from ledbar.supervisor.gate import NetworkGate
from ledbar.supervisor.loop import PipelineEndedError, StartupError, Supervisor, SupervisorState

__all__ = [
    "NetworkGate",
    "PipelineEndedError",
    "StartupError",
    "Supervisor",
    "SupervisorState",
]
