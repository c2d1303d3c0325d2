"""Identifier factories for flattened menu nodes."""
import itertools
import uuid


def new_id():
    """Return a random, collision-resistant node identifier."""
    return str(uuid.uuid4())


def sequential_ids(prefix="node-", start=1):
    """Return an id factory yielding ``node-1``, ``node-2``, ...

    Useful for tests and for reproducible sessions where random ids get in
    the way. Each call creates an independent counter.
    """
    counter = itertools.count(start)
    return lambda: f"{prefix}{next(counter)}"
