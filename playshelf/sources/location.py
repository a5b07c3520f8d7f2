# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2023 Geoffrey Coulaud
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import logging
from collections.abc import Generator, Iterable, Mapping
from os import PathLike
from pathlib import Path
from typing import NamedTuple

from playshelf.registry import NullRegistry, Registry

PathSegment = str | PathLike[str]

_logger = logging.getLogger(__name__)


class LocationSubPath(NamedTuple):
    segment: PathSegment
    is_directory: bool = False


class RegistryCandidate(NamedTuple):
    """A registry value holding a candidate root, optionally below `subpath`."""

    key: str
    value: str
    subpath: PathSegment = ""


class UnresolvableLocationError(Exception):
    def __init__(self, name: str, optional: bool = True) -> None:
        super().__init__(f"No valid location found for {name}")
        self.name = name
        self.optional = optional


class Location:
    """
    Class representing the root directory of a platform's data

    * A location may have multiple candidate roots
    * The user configured override is always favored,
      then the default paths, then the registry values
    * From the candidate root, every subpath must exist for it to be valid
    * The first valid candidate wins, roots are never merged
    """

    name: str
    override: PathSegment | None
    candidates: Iterable[PathSegment]
    registry_candidates: Iterable[RegistryCandidate]
    paths: Mapping[str, LocationSubPath]
    optional: bool

    root: Path | None = None

    def __init__(
        self,
        name: str,
        candidates: Iterable[PathSegment] = (),
        paths: Mapping[str, LocationSubPath] | None = None,
        *,
        override: PathSegment | None = None,
        registry_candidates: Iterable[RegistryCandidate] = (),
        registry: Registry | None = None,
        optional: bool = True,
    ) -> None:
        self.name = name
        self.override = override
        self.candidates = tuple(candidates)
        self.registry_candidates = tuple(registry_candidates)
        self.registry = registry or NullRegistry()
        self.paths = paths or {}
        self.optional = optional

    def check_candidate(self, candidate: Path) -> bool:
        """Check if a candidate root has the necessary files and directories"""
        if not candidate.is_dir():
            return False

        for segment, is_directory in self.paths.values():
            path = candidate / segment
            if is_directory:
                if not path.is_dir():
                    return False
            elif not path.is_file():
                return False

        return True

    def _candidates(self) -> Generator[Path]:
        if self.override:
            yield Path(self.override).expanduser()

        for candidate in self.candidates:
            yield Path(candidate).expanduser()

        # Only hit the registry once every path on disk has been ruled out
        for key, value, subpath in self.registry_candidates:
            if found := self.registry.value(key, value):
                yield Path(found.strip('"'), subpath)

    def resolve(self) -> Path:
        """Choose a root path from the candidates for the location.
        If none fits, raise an UnresolvableLocationError"""

        if self.root is not None:
            return self.root

        for candidate in self._candidates():
            try:
                valid = self.check_candidate(candidate)
            except OSError:
                valid = False

            if valid:
                self.root = candidate
                break
        else:
            raise UnresolvableLocationError(self.name, self.optional)

        _logger.debug("Resolved location for %s: %s", self.name, self.root)
        return self.root

    def __getitem__(self, key: str) -> Path:
        """Get the computed path from its key for the location"""
        return self.resolve() / self.paths[key].segment
