# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Provides `CommandRegistry`, the name-to-descriptor map and argv dispatcher.

Commands are keyed by their path: the tuple of space-separated name segments
(`("config", "set")`). The root command has the empty path. Aliases replace the
last path segment (`("config", "s")` for an alias `s` of `config set`).

`match(argv)` selects the descriptor whose path is the longest prefix of the
leading non-flag tokens, and returns the remaining tokens for the binder:

    registry.match(["config", "set", "--key", "a"])
    # (<config set>, ["--key", "a"])

Lookups are exact and case-sensitive. Misses raise `CommandNotFoundError`
with the closest registered names from `difflib.get_close_matches`.
"""
from __future__ import annotations

from difflib import get_close_matches
from typing import Iterator, Sequence

from bindery.descriptors import CommandDescriptor
from bindery.exceptions import CommandNotFoundError, DuplicateCommandError
from bindery.logger import logger

Path = tuple[str, ...]


class CommandRegistry:
    """
    Registry of command descriptors keyed by command path.

    Methods:
        register(descriptor): Add a descriptor and its aliases.
        resolve(name_tokens): Exact lookup by path or alias.
        match(argv): Longest-prefix dispatch returning the remaining argv.
        children(path): Next-level segment names below a path.
    """

    def __init__(self) -> None:
        self._commands: dict[Path, CommandDescriptor] = {}
        self._aliases: dict[Path, Path] = {}
        self._prefixes: set[Path] = {()}

    def register(self, descriptor: CommandDescriptor) -> None:
        path = descriptor.path
        alias_paths = [path[:-1] + (alias,) for alias in descriptor.aliases]
        collisions = [
            " ".join(candidate) or "<root>"
            for candidate in (path, *alias_paths)
            if candidate in self._commands or candidate in self._aliases
        ]
        if len(set(alias_paths) | {path}) != len(alias_paths) + 1:
            collisions.append(descriptor.display_name)
        if collisions:
            raise DuplicateCommandError(
                f"Command '{descriptor.display_name}' conflicts with existing "
                f"{', '.join(collisions)}."
            )

        self._commands[path] = descriptor
        for alias_path in alias_paths:
            self._aliases[alias_path] = path
        for candidate in (path, *alias_paths):
            for length in range(1, len(candidate) + 1):
                self._prefixes.add(candidate[:length])
        logger.debug(
            "Registered command '%s' (aliases: %s)",
            descriptor.display_name,
            ", ".join(descriptor.aliases) or "none",
        )

    def __contains__(self, name: str | Sequence[str]) -> bool:
        return self._lookup(self._to_path(name)) is not None

    def __iter__(self) -> Iterator[CommandDescriptor]:
        return iter(sorted(self._commands.values(), key=lambda d: d.path))

    def __len__(self) -> int:
        return len(self._commands)

    @property
    def root(self) -> CommandDescriptor | None:
        return self._commands.get(())

    @staticmethod
    def _to_path(name: str | Sequence[str]) -> Path:
        if isinstance(name, str):
            return tuple(name.split())
        return tuple(name)

    def _lookup(self, path: Path) -> CommandDescriptor | None:
        path = self._aliases.get(path, path)
        return self._commands.get(path)

    def names(self) -> list[str]:
        """Every registered command path and alias, space-joined."""
        paths = [*self._commands, *self._aliases]
        return sorted(" ".join(path) for path in paths if path)

    def suggest(self, name: str, n: int = 3) -> list[str]:
        return get_close_matches(name, self.names(), n=n, cutoff=0.6)

    def resolve(self, name_tokens: str | Sequence[str]) -> CommandDescriptor:
        path = self._to_path(name_tokens)
        descriptor = self._lookup(path)
        if descriptor is None:
            name = " ".join(path)
            raise CommandNotFoundError(name, self.suggest(name))
        return descriptor

    def children(self, path: str | Sequence[str] = ()) -> list[str]:
        """Segment names one level below `path`, including aliases."""
        path = self._to_path(path)
        depth = len(path)
        return sorted(
            {
                prefix[depth]
                for prefix in self._prefixes
                if len(prefix) == depth + 1 and prefix[:depth] == path
            }
        )

    def subcommands(self, descriptor: CommandDescriptor) -> list[CommandDescriptor]:
        """Registered descriptors directly below `descriptor`, without aliases."""
        depth = len(descriptor.path)
        return [
            child
            for path, child in sorted(self._commands.items())
            if len(path) == depth + 1 and path[:depth] == descriptor.path
        ]

    def match(self, argv: Sequence[str]) -> tuple[CommandDescriptor, list[str]]:
        """
        Select the descriptor named by the leading tokens of argv.

        Raises:
            CommandNotFoundError: No registered path matches and there is no
                root command, or the tokens name a group without a command.
        """
        argv = list(argv)
        best = self._commands.get(())
        consumed = 0
        prefix: Path = ()
        for index, token in enumerate(argv):
            if token.startswith("-"):
                break
            candidate = prefix + (token,)
            if candidate not in self._prefixes:
                break
            prefix = candidate
            descriptor = self._lookup(prefix)
            if descriptor is not None:
                best = descriptor
                consumed = index + 1

        if prefix and len(prefix) > consumed:
            group = " ".join(prefix)
            subcommands = self.children(prefix)
            raise CommandNotFoundError(
                group,
                subcommands,
                message=f"'{group}' requires a subcommand: {', '.join(subcommands)}",
            )

        if best is None or (best.path == () and self._is_stray_token(best, argv)):
            name = argv[0] if argv else ""
            if not name:
                raise CommandNotFoundError("", [], message="No command specified.")
            raise CommandNotFoundError(name, self.suggest(name))

        logger.debug("Dispatched %s to '%s'", argv[:consumed], best.display_name)
        return best, argv[consumed:]

    @staticmethod
    def _is_stray_token(root: CommandDescriptor, argv: list[str]) -> bool:
        return bool(argv) and not argv[0].startswith("-") and not root.arguments
