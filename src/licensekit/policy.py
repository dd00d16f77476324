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

"""Approval policy: which license families are acceptable."""

from __future__ import annotations

from collections.abc import Iterable

from licensekit.license import LicenseFamily
from licensekit.logging import get_logger
from licensekit.reader import ConfigurationReader

__all__ = [
    'ApprovalPolicy',
]

logger = get_logger(__name__)


def _category(family: LicenseFamily | str) -> str:
    return family.category if isinstance(family, LicenseFamily) else family


class ApprovalPolicy:
    """A mutable set of approved family categories.

    Lookups are exact category matches; an unknown or missing family
    is simply not approved.
    """

    def __init__(self, families: Iterable[LicenseFamily | str] = ()) -> None:
        self._approved: set[str] = {_category(f) for f in families}

    @classmethod
    def from_reader(cls, reader: ConfigurationReader) -> ApprovalPolicy:
        """Seed a policy with a reader's approved families."""
        return cls(reader.approved_license_ids())

    def approve(self, family: LicenseFamily | str | None) -> bool:
        """Return whether *family* is approved."""
        if family is None:
            return False
        return _category(family) in self._approved

    def add(self, family: LicenseFamily | str) -> None:
        """Approve *family*; adding twice is harmless."""
        category = _category(family)
        if category not in self._approved:
            self._approved.add(category)
            logger.debug('family_approved', category=category)

    @property
    def approved_license_names(self) -> tuple[str, ...]:
        """Approved categories, sorted."""
        return tuple(sorted(self._approved))

    def __contains__(self, family: object) -> bool:
        if isinstance(family, (LicenseFamily, str)):
            return self.approve(family)
        return False

    def __len__(self) -> int:
        return len(self._approved)
