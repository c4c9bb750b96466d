from ._sgd import SGD

__all__ = ["SGD"]
