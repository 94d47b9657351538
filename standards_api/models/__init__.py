from .files import File
from .standards import Standard

__all__ = ["File", "Standard"]
