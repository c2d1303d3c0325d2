import sys
import argparse
import logging
from collections.abc import Mapping
from pathlib import Path

# Local imports
from .config import load_menu
from .errors import MenuConfigError, NoSelectionError, TreeMenuError
from .menu import ResolveKind
from .resolver import TreeMenuResolver

logger = logging.getLogger(__name__)

DEFAULT_ID_KEY = 'id'
LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class MenuSession:
    """Terminal walk-through of a TreeMenuResolver.

    Items are listed with 1-based numbers; ``b`` goes back, ``q`` quits.
    """
    def __init__(self, resolver, id_key=DEFAULT_ID_KEY, label_key='label', output=print):
        self.resolver = resolver
        self.id_key = id_key
        self.label_key = label_key
        self.output = output

    def _label(self, item):
        if isinstance(item, Mapping) and self.label_key in item:
            return str(item[self.label_key])
        return repr(item)

    def render(self):
        items = self.resolver.get_displayable_menu()
        if not items:
            return ["  (empty)"]
        return [f"{i}. {self._label(item)}" for i, item in enumerate(items, start=1)]

    def _on_choose(self, position):
        items = self.resolver.get_displayable_menu()
        if not 1 <= position <= len(items):
            self.output("Invalid choice")
            return
        choice = self.resolver.choose(items[position - 1][self.id_key])
        if choice.resolve.kind is ResolveKind.NONE:
            return
        result = choice.resolve()
        if choice.resolve.kind is ResolveKind.STATIC or result is not None:
            self.output(f"-> {result}")

    def _on_back(self):
        try:
            self.resolver.go_back()
        except NoSelectionError:
            self.output("Already at top level")

    def handle(self, command):
        """Apply one command; returns False once the session should end."""
        command = command.strip().lower()
        if command == 'q':
            return False
        if command == 'b':
            self._on_back()
        elif command.isdecimal():
            self._on_choose(int(command))
        else:
            self.output("Invalid choice")
        return True

    def run(self, input_func=input):
        while True:
            for line in self.render():
                self.output(line)
            try:
                command = input_func("[number] choose, [b]ack, [q]uit: ")
            except EOFError:
                break
            if not self.handle(command):
                break


def main(argv=None):
    parser = argparse.ArgumentParser(description="Tree Menu Resolver")
    parser.add_argument("--config", default="menu.yaml", help="Path to menu file")
    parser.add_argument("--inject-id-key", default=None,
                        help=f"Payload key for node ids (default: from config, else '{DEFAULT_ID_KEY}')")
    parser.add_argument("--log-level", default="WARNING", type=str.upper,
                        choices=LOG_LEVELS, help="Logging level")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format='%(asctime)s - %(levelname)s - %(message)s')

    try:
        menu, options = load_menu(Path(args.config))
        id_key = args.inject_id_key or options.inject_id_key or DEFAULT_ID_KEY
        resolver = TreeMenuResolver(menu, inject_id_key=id_key)
    except MenuConfigError as e:
        logger.error(f"Failed to load config: {e}")
        return 1
    except TreeMenuError as e:
        logger.error(f"Invalid menu: {e}")
        return 1

    MenuSession(resolver, id_key=id_key).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
