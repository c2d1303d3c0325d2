"""Depth-first flattening of a nested menu tree into an id-keyed index."""
import logging
from collections.abc import Mapping
from types import MappingProxyType

from .errors import CircularReferenceError, DuplicateIdError, InvalidMenuError
from .ids import new_id
from .menu import FlatNode, MenuItem, Resolve, ResolveKind

logger = logging.getLogger(__name__)


def flatten(roots, id_factory=new_id, inject_id_key=None, wrap_callback=None):
    """Flatten ``roots`` into a dict of id -> FlatNode.

    Nodes are inserted in depth-first pre-order, so the children of any
    parent appear in their input order.

    Args:
        roots: List of MenuItem objects or mappings.
        id_factory: Zero-argument callable returning a fresh string id.
        inject_id_key: If set, each node's payload is copied with the
            generated id stored under this key.
        wrap_callback: ``wrap_callback(node_id, callback)`` turns a custom
            resolve callback into a zero-argument thunk. Without it the
            callback is stored as given.

    Raises:
        CircularReferenceError: An item is its own ancestor.
        DuplicateIdError: ``id_factory`` returned an id twice.
        InvalidMenuError: The input is structurally malformed.
    """
    if not isinstance(roots, (list, tuple)):
        raise InvalidMenuError(f"menu must be a list, got {type(roots).__name__}")

    index = {}
    # ancestors maps id(raw item) -> address for the current descent path only
    ancestors = {}
    # frame: [sibling items, next position, parent_id, address, marker of the parent item]
    stack = [[roots, 0, None, '', None]]
    while stack:
        frame = stack[-1]
        items, position, parent_id, address, owner = frame
        if position >= len(items):
            stack.pop()
            if owner is not None:
                del ancestors[owner]
            continue
        frame[1] = position + 1

        raw = items[position]
        item_address = f"{address}.{position}" if address else str(position)
        marker = id(raw)
        if marker in ancestors:
            raise CircularReferenceError(_describe_cycle(ancestors, marker))

        item = MenuItem.coerce(raw)
        node_id = id_factory()
        if node_id in index:
            raise DuplicateIdError(node_id)

        index[node_id] = FlatNode(
            id=node_id,
            data=_inject_id(item.data, inject_id_key, node_id),
            parent_id=parent_id,
            has_children=item.has_children,
            resolve=_wrap_resolve(item, node_id, wrap_callback),
        )

        if item.has_children:
            ancestors[marker] = item_address
            stack.append([item.children, 0, node_id, item_address, marker])

    logger.debug(f"Flattened {len(index)} menu nodes from {len(roots)} top-level items")
    return index


def _describe_cycle(ancestors, marker):
    path = list(ancestors.values())
    start = path.index(ancestors[marker])
    return path[start:] + [ancestors[marker]]


def _inject_id(data, key, node_id):
    if key is None:
        return data
    if data is None:
        return MappingProxyType({key: node_id})
    if not isinstance(data, Mapping):
        raise InvalidMenuError(
            f"cannot inject id into payload of type {type(data).__name__}"
        )
    injected = dict(data)
    injected[key] = node_id
    return MappingProxyType(injected)


def _wrap_resolve(item, node_id, wrap_callback):
    kind = item.resolve_kind
    if kind is ResolveKind.CALLBACK:
        thunk = wrap_callback(node_id, item.resolve) if wrap_callback else item.resolve
        return Resolve.callback(thunk)
    if kind is ResolveKind.STATIC:
        return Resolve.static(item.resolve)
    return Resolve.none()
