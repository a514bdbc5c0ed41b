# Generation engine
# .orchestrator is not re-exported here: the gateway imports this package.
from .cancellation import CancellationController, CancellationToken, GenerationSession

__all__ = [
    "CancellationController",
    "CancellationToken",
    "GenerationSession",
]
