from .garden import Garden
from .engine import Engine
from .gag import GAG

__all__ = ["Garden", "Engine", "GAG"]
