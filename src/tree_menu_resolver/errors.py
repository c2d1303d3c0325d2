"""Exception types raised by the menu resolver."""


class TreeMenuError(Exception):
    """Base class for all menu resolver errors."""


class NodeNotFoundError(TreeMenuError, KeyError):
    """Raised when an identifier is not present in the flattened index."""

    def __init__(self, node_id):
        self.node_id = node_id
        super().__init__(f"Node with id {node_id} not found")

    def __str__(self):
        # KeyError would otherwise repr() the message
        return self.args[0]


class NoSelectionError(TreeMenuError):
    """Raised by go_back() when the cursor is already at the top level."""

    def __init__(self, message="You haven't chosen any node"):
        super().__init__(message)


class InternalConsistencyError(TreeMenuError):
    """The cursor points at a node that is no longer in the index."""

    def __init__(self, node_id):
        self.node_id = node_id
        super().__init__(f"Current node with id {node_id} not found")


class InvalidMenuError(TreeMenuError, ValueError):
    """Raised when a menu definition is structurally malformed."""


class DuplicateIdError(InvalidMenuError):
    """Raised when the id factory hands out the same identifier twice."""

    def __init__(self, node_id):
        self.node_id = node_id
        super().__init__(f"Id factory produced duplicate id {node_id}")


class CircularReferenceError(TreeMenuError):
    """Raised when a menu item is its own ancestor.

    Attributes:
        cycle: Positional addresses from the repeated ancestor down to the
            item that refers back to it, e.g. ``('0', '0.1', '0')``.
    """

    def __init__(self, cycle):
        self.cycle = tuple(cycle)
        super().__init__(f"Circular reference detected: {' -> '.join(self.cycle)}")


class MenuConfigError(TreeMenuError):
    """Raised when a YAML menu definition cannot be loaded."""
