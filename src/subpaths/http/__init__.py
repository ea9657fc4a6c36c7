"""HTTP primitives: the immutable request seen by path processors."""
