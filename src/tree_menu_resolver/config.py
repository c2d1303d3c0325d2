"""Loading menu definitions from YAML files."""
import logging
from collections.abc import Mapping

import yaml

from .errors import MenuConfigError
from .resolver import ResolverOptions, TreeMenuResolver

logger = logging.getLogger(__name__)

KNOWN_OPTIONS = ('inject_id_key',)


def load_config(path):
    """Read and parse a YAML menu file.

    Args:
        path: Path to the YAML file.

    Returns:
        The parsed top-level mapping.

    Raises:
        MenuConfigError: File missing, unreadable, invalid YAML or lacking
            a ``menu`` list.
    """
    try:
        with open(path, 'r') as f:
            config = yaml.safe_load(f)
    except OSError as e:
        raise MenuConfigError(f"Failed to read menu config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise MenuConfigError(f"Failed to parse menu config {path}: {e}") from e

    if not isinstance(config, Mapping):
        raise MenuConfigError(f"Menu config {path} must be a mapping at the top level")
    if not isinstance(config.get('menu'), list):
        raise MenuConfigError(f"Menu config {path} needs a 'menu' list")
    logger.debug(f"Loaded menu config from {path}")
    return config


def _parse_options(raw_options, path):
    if raw_options is None:
        return ResolverOptions()
    if not isinstance(raw_options, Mapping):
        raise MenuConfigError(f"'options' in {path} must be a mapping")
    unknown = sorted(set(raw_options) - set(KNOWN_OPTIONS))
    if unknown:
        raise MenuConfigError(f"Unknown options in {path}: {', '.join(unknown)}")
    return ResolverOptions(inject_id_key=raw_options.get('inject_id_key'))


def load_menu(path):
    """Return ``(menu, options)`` from a YAML menu file.

    Menu entries stay as parsed mappings; they are converted while the
    tree is flattened, so aliases that loop back on themselves are
    reported as a CircularReferenceError instead of recursing here.
    """
    config = load_config(path)
    return config['menu'], _parse_options(config.get('options'), path)


def resolver_from_config(path, inject_id_key=None, id_factory=None):
    """Build a TreeMenuResolver from a YAML menu file."""
    menu, options = load_menu(path)
    return TreeMenuResolver(menu, inject_id_key=inject_id_key,
                            id_factory=id_factory, options=options)
