# SPDX-License-Identifier: GPL-3.0-or-later
# SPDX-FileCopyrightText: Copyright 2026 Playshelf Contributors

import pytest
from conftest import FakeRegistry

from playshelf.sources.location import (
    Location,
    LocationSubPath,
    RegistryCandidate,
    UnresolvableLocationError,
)

_KEY = r"HKEY_LOCAL_MACHINE\SOFTWARE\Vendor\Launcher"


@pytest.fixture
def roots(tmp_path):
    paths = []
    for name in "override", "default", "registry":
        root = tmp_path / name
        root.mkdir()
        (root / "launcher.exe").touch()
        paths.append(root)

    return paths


def _location(override, default, registry_root, **kwargs):
    return Location(
        "Launcher",
        (default,),
        {"client": LocationSubPath("launcher.exe")},
        override=override,
        registry_candidates=(RegistryCandidate(_KEY, "InstallPath"),),
        registry=FakeRegistry({_KEY: {"InstallPath": f'"{registry_root}"'}}),
        **kwargs,
    )


def test_override_wins(roots):
    override, default, registry_root = roots

    assert _location(override, default, registry_root).resolve() == override


def test_defaults_before_registry(roots):
    _override, default, registry_root = roots

    assert _location(None, default, registry_root).resolve() == default


def test_registry_is_last(roots, tmp_path):
    _override, _default, registry_root = roots

    location = _location(None, tmp_path / "missing", registry_root)

    assert location.resolve() == registry_root
    assert location["client"] == registry_root / "launcher.exe"


def test_candidate_needs_every_subpath(roots, tmp_path):
    override, default, registry_root = roots
    (override / "launcher.exe").unlink()

    assert _location(override, default, registry_root).resolve() == default


def test_unresolvable(tmp_path):
    location = Location(
        "Launcher",
        (tmp_path / "missing",),
        {"data": LocationSubPath("data", is_directory=True)},
        optional=False,
    )

    with pytest.raises(UnresolvableLocationError) as info:
        location.resolve()

    assert not info.value.optional
    assert info.value.name == "Launcher"
