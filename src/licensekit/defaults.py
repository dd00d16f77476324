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

"""Bundled default rules and one-call engine assembly.

The default rules (``data/default-rules.xml``) declare the common
license families and approve the permissive ones.  :func:`build_engine`
turns a :class:`~licensekit.config.LicensekitConfig` into loaded
licenses plus an approval policy.
"""

from __future__ import annotations

import importlib.resources as _resources
from dataclasses import dataclass

from licensekit.config import LicensekitConfig
from licensekit.document import RuleDocument, parse_xml
from licensekit.license import License
from licensekit.logging import get_logger
from licensekit.policy import ApprovalPolicy
from licensekit.reader import ConfigurationReader

__all__ = [
    'DEFAULT_RULES',
    'Engine',
    'build_engine',
    'default_document',
    'default_reader',
]

logger = get_logger(__name__)

DEFAULT_RULES = 'default-rules.xml'


def default_document() -> RuleDocument:
    """Parse the bundled default rules."""
    ref = _resources.files('licensekit').joinpath('data', DEFAULT_RULES)
    return parse_xml(ref.read_bytes(), source=f'licensekit:{DEFAULT_RULES}')


def default_reader() -> ConfigurationReader:
    """Return a reader preloaded with the bundled default rules."""
    reader = ConfigurationReader()
    reader.add(default_document())
    return reader


@dataclass(frozen=True)
class Engine:
    """Loaded licenses and the policy that judges them.

    Attributes:
        licenses: Licenses sorted by family.
        policy: Approval policy seeded from the rules and settings.
        header_lines: Leading lines scanned per file.
    """

    licenses: tuple[License, ...]
    policy: ApprovalPolicy
    header_lines: int


def build_engine(config: LicensekitConfig) -> Engine:
    """Load the configured rules and build the approval policy.

    Raises:
        ConfigurationError: If any rule document is invalid.
    """
    reader = default_reader() if config.use_defaults else ConfigurationReader()
    reader.read(*config.rules)
    licenses = reader.read_licenses()
    policy = ApprovalPolicy.from_reader(reader)
    for category in config.approve:
        policy.add(category)
    logger.debug(
        'engine_built',
        licenses=len(licenses),
        approved=list(policy.approved_license_names),
        defaults=config.use_defaults,
    )
    return Engine(licenses=licenses, policy=policy, header_lines=config.header_lines)
