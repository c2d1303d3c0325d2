"""Stateful navigation over a flattened menu tree."""
import logging
from collections import namedtuple
from types import MappingProxyType

from .errors import InternalConsistencyError, NodeNotFoundError, NoSelectionError
from .flatten import flatten
from .ids import new_id

logger = logging.getLogger(__name__)

Choice = namedtuple('Choice', ['id', 'resolve'])


class ResolverOptions:
    """Construction options for TreeMenuResolver."""
    def __init__(self, inject_id_key=None, id_factory=None):
        self.inject_id_key = inject_id_key
        self.id_factory = id_factory

    def __eq__(self, other):
        if not isinstance(other, ResolverOptions):
            return NotImplemented
        return (self.inject_id_key == other.inject_id_key and
                self.id_factory == other.id_factory)

    def __repr__(self):
        return f"ResolverOptions(inject_id_key={self.inject_id_key!r}, id_factory={self.id_factory!r})"


class ResolverAPI:
    """Handle given to custom resolve callbacks.

    ``choose`` and ``go_back`` drive the same resolver that owns the
    callback, so calling them from inside a callback moves the live cursor.
    ``current_node`` is always the node the callback belongs to.
    """
    def __init__(self, resolver, node_id):
        self._resolver = resolver
        self._node_id = node_id
        self.choose = resolver.choose
        self.go_back = resolver.go_back

    @property
    def current_node(self):
        return self._resolver.get_node(self._node_id)

    def __repr__(self):
        return f"ResolverAPI(current_node={self._node_id!r})"


class TreeMenuResolver:
    """Flattens a menu tree once and navigates it one level at a time."""

    def __init__(self, menu, inject_id_key=None, id_factory=None, options=None):
        """Build the index for ``menu`` and start at the top level.

        Args:
            menu: List of MenuItem objects or mappings.
            inject_id_key: Payload key that receives each node's id.
            id_factory: Zero-argument callable minting unique string ids.
            options: ResolverOptions; explicit keyword arguments win.
        """
        options = options or ResolverOptions()
        self.inject_id_key = inject_id_key if inject_id_key is not None else options.inject_id_key
        id_factory = id_factory or options.id_factory or new_id

        self._nodes = flatten(
            menu,
            id_factory=id_factory,
            inject_id_key=self.inject_id_key,
            wrap_callback=self._bind_callback,
        )
        self._current_node_id = None

    def _bind_callback(self, node_id, callback):
        def dispatch():
            logger.debug(f"Dispatching resolve callback of node {node_id}")
            return callback(ResolverAPI(self, node_id))
        return dispatch

    @property
    def current_node_id(self):
        return self._current_node_id

    @property
    def current_node(self):
        if self._current_node_id is None:
            return None
        return self.get_node(self._current_node_id)

    @property
    def nodes(self):
        """Read-only view of the id -> FlatNode index."""
        return MappingProxyType(self._nodes)

    def __len__(self):
        return len(self._nodes)

    def get_node(self, node_id):
        node = self._nodes.get(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    def get_displayable_menu(self):
        """Return the payloads of the items on the current level, in order.

        Injected payloads are frozen in the index; callers get a fresh dict
        copy of each one.
        """
        parent_id = self._current_node_id
        level = [node for node in self._nodes.values() if node.parent_id == parent_id]
        if self.inject_id_key is None:
            return [node.data for node in level]
        return [dict(node.data) for node in level]

    def choose(self, node_id):
        """Select a menu item by id.

        Items with children become the current level; leaves leave the
        level unchanged. Any id in the index is accepted, not only those
        on the current level.

        Returns:
            Choice with the node's ``id`` and its ``resolve``.

        Raises:
            NodeNotFoundError: ``node_id`` is not in the index.
        """
        node = self.get_node(node_id)
        if node.has_children:
            logger.debug(f"Cursor {self._current_node_id} -> {node_id}")
            self._current_node_id = node_id
        return Choice(id=node.id, resolve=node.resolve)

    def go_back(self):
        """Move the cursor one level up.

        Raises:
            NoSelectionError: Already at the top level.
            InternalConsistencyError: The current node vanished from the index.
        """
        if self._current_node_id is None:
            raise NoSelectionError()

        node = self._nodes.get(self._current_node_id)
        if node is None:
            raise InternalConsistencyError(self._current_node_id)

        logger.debug(f"Cursor {self._current_node_id} -> {node.parent_id}")
        self._current_node_id = node.parent_id
