# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""Tool settings for licensekit.

Settings come from ``licensekit.toml``::

    rules = ["rules/company.xml"]
    use_defaults = true
    approve = ["ACME"]
    header_lines = 50

or from the ``[tool.licensekit]`` table of ``pyproject.toml`` with the
same keys.  Relative rule paths resolve against the settings file.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from licensekit.analysis import DEFAULT_HEADER_LINES
from licensekit.errors import ConfigurationError

__all__ = [
    'CONFIG_FILENAME',
    'LicensekitConfig',
    'find_config',
    'load_config',
]

CONFIG_FILENAME = 'licensekit.toml'
_PYPROJECT = 'pyproject.toml'

_KNOWN_KEYS = frozenset({'rules', 'use_defaults', 'approve', 'header_lines'})


@dataclass(frozen=True)
class LicensekitConfig:
    """Resolved licensekit settings.

    Attributes:
        rules: Extra rule documents (paths or URLs), in merge order.
        use_defaults: Whether the bundled default rules are loaded first.
        approve: Extra family categories approved on top of the rules.
        header_lines: Leading lines scanned per file.
        path: The settings file, or ``None`` for built-in defaults.
    """

    rules: tuple[str, ...] = ()
    use_defaults: bool = True
    approve: tuple[str, ...] = ()
    header_lines: int = DEFAULT_HEADER_LINES
    path: Path | None = field(default=None, compare=False)


def _str_list(data: dict[str, Any], key: str, source: str) -> tuple[str, ...]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(f'{key!r} must be a list of strings', source=source)
    return tuple(value)


def _resolve_rule(rule: str, base: Path) -> str:
    if rule.lower().startswith(('file:', 'http:', 'https:')):
        return rule
    path = Path(rule)
    return str(path if path.is_absolute() else base / path)


def _from_table(data: dict[str, Any], path: Path) -> LicensekitConfig:
    source = str(path)
    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigurationError(f'unknown setting(s): {", ".join(unknown)}', source=source)

    use_defaults = data.get('use_defaults', True)
    if not isinstance(use_defaults, bool):
        raise ConfigurationError("'use_defaults' must be a boolean", source=source)
    header_lines = data.get('header_lines', DEFAULT_HEADER_LINES)
    if isinstance(header_lines, bool) or not isinstance(header_lines, int) or header_lines < 1:
        raise ConfigurationError("'header_lines' must be a positive integer", source=source)

    return LicensekitConfig(
        rules=tuple(_resolve_rule(r, path.parent) for r in _str_list(data, 'rules', source)),
        use_defaults=use_defaults,
        approve=_str_list(data, 'approve', source),
        header_lines=header_lines,
        path=path,
    )


def load_config(path: Path) -> LicensekitConfig:
    """Load settings from *path*.

    ``pyproject.toml`` files are read from ``[tool.licensekit]``; a
    pyproject without that table yields the defaults.

    Raises:
        ConfigurationError: If the file is unreadable or invalid.
    """
    try:
        with path.open('rb') as f:
            data = tomllib.load(f)
    except OSError as exc:
        raise ConfigurationError(f'unable to read settings: {exc}', source=str(path)) from exc
    except UnicodeDecodeError as exc:
        raise ConfigurationError(f'settings are not valid UTF-8: {exc}', source=str(path)) from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f'malformed TOML: {exc}', source=str(path)) from exc

    if path.name == _PYPROJECT:
        table = data.get('tool', {}).get('licensekit')
        if table is None:
            return LicensekitConfig(path=path)
        if not isinstance(table, dict):
            raise ConfigurationError('[tool.licensekit] must be a table', source=str(path))
        data = table
    return _from_table(data, path)


def find_config(start: Path) -> Path | None:
    """Find the nearest settings file at or above *start*.

    ``licensekit.toml`` wins over a ``pyproject.toml`` in the same
    directory; a pyproject only counts if it has ``[tool.licensekit]``.
    """
    start = start.resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        pyproject = directory / _PYPROJECT
        if pyproject.is_file():
            try:
                with pyproject.open('rb') as f:
                    data = tomllib.load(f)
            except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
                continue
            if 'licensekit' in data.get('tool', {}):
                return pyproject
    return None
