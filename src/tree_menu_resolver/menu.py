"""Menu structure, resolve actions and flattened node representation."""
from collections.abc import Mapping
from enum import Enum

from .errors import InvalidMenuError

# Keys with structural meaning in a mapping-style menu definition.
CHILDREN_KEYS = ('children', 'items')
RESOLVE_KEYS = ('resolve', 'action')


class ResolveKind(Enum):
    """What a node does when it is resolved."""
    NONE = "none"
    STATIC = "static"
    CALLBACK = "callback"


class Resolve:
    """Tagged resolve value attached to every flattened node.

    ``value`` is ``None`` for NONE, the opaque token for STATIC and a
    zero-argument dispatch thunk for CALLBACK. Calling the instance
    dispatches on the tag.
    """
    __slots__ = ('kind', 'value')

    def __init__(self, kind, value=None):
        self.kind = kind
        self.value = value

    @classmethod
    def none(cls):
        return cls(ResolveKind.NONE)

    @classmethod
    def static(cls, token):
        return cls(ResolveKind.STATIC, token)

    @classmethod
    def callback(cls, thunk):
        return cls(ResolveKind.CALLBACK, thunk)

    def __call__(self):
        if self.kind is ResolveKind.CALLBACK:
            return self.value()
        if self.kind is ResolveKind.STATIC:
            return self.value
        return None

    def __bool__(self):
        return self.kind is not ResolveKind.NONE

    def __eq__(self, other):
        if not isinstance(other, Resolve):
            return NotImplemented
        return self.kind is other.kind and self.value == other.value

    def __hash__(self):
        return hash(self.kind)

    def __repr__(self):
        if self.kind is ResolveKind.NONE:
            return "Resolve.none()"
        return f"Resolve.{self.kind.value}({self.value!r})"


class MenuItem:
    """Represents a single item in the caller's menu tree.

    The variant is inferred from ``resolve``: ``None`` makes a parent,
    a callable makes a custom action, anything else is a static token.
    """
    def __init__(self, data=None, resolve=None, children=None):
        if children is not None and not isinstance(children, (list, tuple)):
            raise InvalidMenuError(
                f"children must be a list, got {type(children).__name__}"
            )
        self.data = data
        self.resolve = resolve
        self.children = children if children is not None else []

    @classmethod
    def parent(cls, data=None, children=None):
        return cls(data=data, children=children)

    @classmethod
    def action(cls, data=None, token=None, children=None):
        if token is None or callable(token):
            raise InvalidMenuError("action() needs a static, non-callable token")
        return cls(data=data, resolve=token, children=children)

    @classmethod
    def custom(cls, data=None, callback=None, children=None):
        if not callable(callback):
            raise InvalidMenuError("custom() needs a callable taking a ResolverAPI")
        return cls(data=data, resolve=callback, children=children)

    @classmethod
    def from_dict(cls, raw):
        """Build an item from a mapping such as a parsed YAML entry.

        Only this level is converted; children are kept as given so that
        the flattener sees the caller's original objects.

        Args:
            raw: Mapping with optional ``data``, ``resolve``/``action`` and
                ``children``/``items`` keys. Without ``data``, every other
                key forms the payload (``{'label': 'Exit'}``).

        Raises:
            InvalidMenuError: Both keys of an alias pair are present.
        """
        for aliases in (CHILDREN_KEYS, RESOLVE_KEYS):
            if all(k in raw for k in aliases):
                raise InvalidMenuError(f"menu item sets both {' and '.join(aliases)}")
        children = next((raw[k] for k in CHILDREN_KEYS if k in raw), None)
        resolve = next((raw[k] for k in RESOLVE_KEYS if k in raw), None)
        if 'data' in raw:
            data = raw['data']
        else:
            structural = CHILDREN_KEYS + RESOLVE_KEYS
            data = {k: v for k, v in raw.items() if k not in structural} or None
        return cls(data=data, resolve=resolve, children=children)

    @classmethod
    def coerce(cls, raw):
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, Mapping):
            return cls.from_dict(raw)
        raise InvalidMenuError(
            f"menu items must be MenuItem or mapping, got {type(raw).__name__}"
        )

    @property
    def has_children(self):
        return bool(self.children)

    @property
    def resolve_kind(self):
        if self.resolve is None:
            return ResolveKind.NONE
        if callable(self.resolve):
            return ResolveKind.CALLBACK
        return ResolveKind.STATIC

    def __repr__(self):
        return f"MenuItem(data={self.data!r}, resolve={self.resolve!r}, children={len(self.children)})"


class FlatNode:
    """One flattened, uniquely identified record derived from a MenuItem."""
    __slots__ = ('_id', '_data', '_parent_id', '_has_children', '_resolve')

    def __init__(self, id, data, parent_id, has_children, resolve):
        self._id = id
        self._data = data
        self._parent_id = parent_id
        self._has_children = has_children
        self._resolve = resolve

    @property
    def id(self):
        return self._id

    @property
    def data(self):
        return self._data

    @property
    def parent_id(self):
        return self._parent_id

    @property
    def has_children(self):
        return self._has_children

    @property
    def resolve(self):
        return self._resolve

    @property
    def is_top_level(self):
        return self._parent_id is None

    def __repr__(self):
        return (f"FlatNode(id={self._id!r}, parent_id={self._parent_id!r}, "
                f"has_children={self._has_children}, resolve={self._resolve!r})")
