# RailLovable Models
from .project import ProjectRecord

__all__ = [
    "ProjectRecord",
]
