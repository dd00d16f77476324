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

"""License and license-family model.

A :class:`License` ties one root :class:`~licensekit.matchers.Matcher`
to a :class:`LicenseFamily`.  Families compare, hash and sort by their
category code only; the display name is presentational.

Build-host integrations create licenses through :class:`LicenseBuilder`::

    lic = (
        LicenseBuilder()
        .set_license_family_category('AL')
        .set_license_family_name('Apache License Version 2.0')
        .set_notes('Requires a NOTICE file.')
        .set_matcher(create_text_matcher('Licensed under the Apache License'))
        .build()
    )
"""

from __future__ import annotations

import copy
from collections.abc import Iterable
from dataclasses import dataclass, field

from licensekit.builders import MatcherBuilder
from licensekit.errors import ConfigurationError
from licensekit.matchers import Matcher, State

__all__ = [
    'License',
    'LicenseBuilder',
    'LicenseFamily',
    'search_family',
]


@dataclass(frozen=True, order=True)
class LicenseFamily:
    """Identity of a group of licenses.

    Attributes:
        category: Short stable key, e.g. ``"AL"``.  Sole comparison key.
        name: Display name, e.g. ``"Apache License Version 2.0"``.
    """

    category: str
    name: str = field(default='', compare=False)

    def __str__(self) -> str:
        """Return ``"category: name"``."""
        return f'{self.category}: {self.name}' if self.name else self.category


def search_family(target: LicenseFamily | str, families: Iterable[LicenseFamily]) -> LicenseFamily | None:
    """Return the member of *families* with *target*'s category, if any."""
    category = target.category if isinstance(target, LicenseFamily) else target
    for family in families:
        if family.category == category:
            return family
    return None


@dataclass(frozen=True, order=True)
class License:
    """A license: family identity plus the matcher that recognizes it.

    Licenses sort and compare by family.  The matcher is stateful; use
    :meth:`clone` to get an independent instance per worker.

    Attributes:
        family: The license family.
        matcher: Root matcher for this license's header.
        notes: Free-text notes, or ``None``.
        derived_from: Category code of the family this one derives
            from (informational), or ``None``.
    """

    family: LicenseFamily
    matcher: Matcher = field(compare=False, repr=False)
    notes: str | None = field(default=None, compare=False)
    derived_from: str | None = field(default=None, compare=False)

    @property
    def id(self) -> str:
        """The family category code."""
        return self.family.category

    @property
    def name(self) -> str:
        """The family display name."""
        return self.family.name

    def matches(self, line: str) -> State:
        """Feed one header line to the matcher."""
        return self.matcher.matches(line)

    def current_state(self) -> State:
        """Return the matcher's current state."""
        return self.matcher.current_state()

    def reset(self) -> None:
        """Reset the matcher for the next file."""
        self.matcher.reset()

    def finalize_state(self) -> State:
        """Finalize the matcher."""
        return self.matcher.finalize_state()

    def clone(self) -> License:
        """Return a copy with an independent, reset matcher tree."""
        matcher = copy.deepcopy(self.matcher)
        matcher.reset()
        return License(family=self.family, matcher=matcher, notes=self.notes, derived_from=self.derived_from)


class LicenseBuilder:
    """Fluent builder for :class:`License`."""

    def __init__(self) -> None:
        self._category: str | None = None
        self._name: str | None = None
        self._notes: str | None = None
        self._derived_from: str | None = None
        self._matcher: Matcher | MatcherBuilder | None = None

    def set_license_family_category(self, category: str | None) -> LicenseBuilder:
        """Set the family category code."""
        self._category = category
        return self

    def set_license_family_name(self, name: str | None) -> LicenseBuilder:
        """Set the family display name."""
        self._name = name
        return self

    def set_notes(self, notes: str | None) -> LicenseBuilder:
        """Set free-text notes; blank notes are stored as ``None``."""
        self._notes = notes.strip() if notes and notes.strip() else None
        return self

    def set_derived_from(self, derived_from: str | None) -> LicenseBuilder:
        """Set the parent family category; blank is stored as ``None``."""
        self._derived_from = derived_from.strip() if derived_from and derived_from.strip() else None
        return self

    def set_matcher(self, matcher: Matcher | MatcherBuilder) -> LicenseBuilder:
        """Set the root matcher, or a builder that produces it.

        Raises:
            ConfigurationError: If a root matcher was already set.
        """
        if self._matcher is not None:
            raise ConfigurationError('a license takes exactly one root matcher', node='license')
        self._matcher = matcher
        return self

    def build(self) -> License:
        """Build the license.

        Raises:
            ConfigurationError: If the category, name or matcher is
                missing, or the matcher builder fails.
        """
        category = (self._category or '').strip()
        if not category:
            raise ConfigurationError('license requires an id (family category)', node='license')
        name = (self._name or '').strip()
        if not name:
            raise ConfigurationError(f'license {category!r} requires a name', node='license')
        if self._matcher is None:
            raise ConfigurationError(f'license {category!r} requires a matcher', node='license')
        matcher = self._matcher.build() if isinstance(self._matcher, MatcherBuilder) else self._matcher
        return License(
            family=LicenseFamily(category=category, name=name),
            matcher=matcher,
            notes=self._notes,
            derived_from=self._derived_from,
        )
