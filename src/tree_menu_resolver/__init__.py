"""Tree Menu Resolver - flatten nested menus and navigate them level by level."""

from .config import load_config, load_menu, resolver_from_config
from .errors import (
    CircularReferenceError,
    DuplicateIdError,
    InternalConsistencyError,
    InvalidMenuError,
    MenuConfigError,
    NodeNotFoundError,
    NoSelectionError,
    TreeMenuError,
)
from .flatten import flatten
from .ids import new_id, sequential_ids
from .menu import FlatNode, MenuItem, Resolve, ResolveKind
from .resolver import Choice, ResolverAPI, ResolverOptions, TreeMenuResolver

__all__ = [
    'TreeMenuResolver', 'ResolverOptions', 'ResolverAPI', 'Choice',
    'MenuItem', 'FlatNode', 'Resolve', 'ResolveKind',
    'flatten', 'new_id', 'sequential_ids',
    'load_config', 'load_menu', 'resolver_from_config',
    'TreeMenuError', 'NodeNotFoundError', 'NoSelectionError', 'CircularReferenceError',
    'InternalConsistencyError', 'InvalidMenuError', 'DuplicateIdError', 'MenuConfigError',
]
