"""Exceptions raised by the graph container."""


class GraphEditError(ValueError):
    """A requested edit would break a graph invariant; the graph is left untouched."""
