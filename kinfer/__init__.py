"""A small neural-network inference runtime built on numpy: in-memory graphs, a layer registry, stored zip archives and float32 math approximations."""

__version__ = "0.1.0"