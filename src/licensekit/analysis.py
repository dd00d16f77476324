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

"""Feed a file's header lines through the licenses and apply the policy.

An analyser owns private copies of the licenses it is given, so
several analysers (one per worker) can run side by side over the same
loaded configuration.

Usage::

    analyser = HeaderAnalyser(reader.read_licenses(), ApprovalPolicy.from_reader(reader))
    result = analyser.analyse_file(Path('src/main.c'))
    if not result.approved:
        ...
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from itertools import islice
from pathlib import Path

from licensekit.license import License, LicenseFamily
from licensekit.logging import get_logger
from licensekit.matchers import State
from licensekit.policy import ApprovalPolicy

__all__ = [
    'DEFAULT_HEADER_LINES',
    'HeaderAnalyser',
    'HeaderMatch',
]

logger = get_logger(__name__)

# Number of leading lines treated as the header.
DEFAULT_HEADER_LINES = 50


@dataclass(frozen=True)
class HeaderMatch:
    """Outcome of analysing one header.

    Attributes:
        source: What was analysed (usually a file path).
        families: Every family whose matcher finalized ``TRUE``, in
            family order.
        approved: Whether the recognized family is approved.
    """

    source: str
    families: tuple[LicenseFamily, ...]
    approved: bool

    @property
    def family(self) -> LicenseFamily | None:
        """The recognized family (first match), or ``None``."""
        return self.families[0] if self.families else None

    @property
    def recognized(self) -> bool:
        """``True`` if any license matched."""
        return bool(self.families)


class HeaderAnalyser:
    """Matches headers against a set of licenses.

    Args:
        licenses: Licenses to try; each is cloned.
        policy: Approval policy to consult.
        header_lines: How many leading lines to scan.
    """

    def __init__(
        self,
        licenses: Iterable[License],
        policy: ApprovalPolicy,
        *,
        header_lines: int = DEFAULT_HEADER_LINES,
    ) -> None:
        if header_lines < 1:
            raise ValueError(f'header_lines must be positive, got {header_lines}')
        self.licenses = tuple(sorted(lic.clone() for lic in licenses))
        self.policy = policy
        self.header_lines = header_lines

    def analyse_lines(self, lines: Iterable[str], source: str = '<lines>') -> HeaderMatch:
        """Analyse the first :attr:`header_lines` of *lines*."""
        for lic in self.licenses:
            lic.reset()
        pending = list(self.licenses)
        for line in islice(lines, self.header_lines):
            line = line.rstrip('\r\n')
            pending = [lic for lic in pending if lic.matches(line) is State.UNKNOWN]
            if not pending:
                break
        families = tuple(lic.family for lic in self.licenses if lic.finalize_state() is State.TRUE)
        result = HeaderMatch(
            source=source,
            families=families,
            approved=self.policy.approve(families[0] if families else None),
        )
        logger.debug(
            'header_analysed',
            source=source,
            family=result.family.category if result.family else None,
            approved=result.approved,
        )
        return result

    def analyse_text(self, text: str, source: str = '<text>') -> HeaderMatch:
        """Analyse a whole document held in memory."""
        return self.analyse_lines(text.splitlines(), source=source)

    def analyse_file(self, path: Path) -> HeaderMatch:
        """Analyse the header of the file at *path*.

        Undecodable bytes are replaced rather than failing the file.

        Raises:
            OSError: If the file cannot be opened.
        """
        with path.open(encoding='utf-8', errors='replace') as f:
            return self.analyse_lines(f, source=str(path))
