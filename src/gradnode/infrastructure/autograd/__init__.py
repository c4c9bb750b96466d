from ._engine import GraphEngine, backward

__all__ = ["GraphEngine", "backward"]
