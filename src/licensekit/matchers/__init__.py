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

r"""Header matchers.

This subpackage provides the :class:`Matcher` protocol and its
built-in implementations.  Third parties add new kinds by implementing
the protocol and registering a builder (see :mod:`licensekit.registry`).

Built-in matchers:

- :class:`SimpleTextMatcher` / :class:`FullTextMatcher`: literal text
- :class:`CopyrightMatcher`: ``Copyright (c) 2010-2012 Owner``
- :class:`SpdxMatcher`: ``SPDX-License-Identifier: Apache-2.0``
- :class:`AndMatcher`, :class:`OrMatcher`, :class:`NotMatcher`
- :class:`MatcherRef`: a copy of a matcher registered by id

Usage::

    from licensekit.matchers import CopyrightMatcher, OrMatcher, State, create_text_matcher

    matcher = OrMatcher([
        create_text_matcher('Licensed under the Apache License, Version 2.0'),
        CopyrightMatcher(start='2020', owner='Acme'),
    ])
    matcher.matches('# Copyright 2020 Acme Inc.')
    assert matcher.finalize_state() is State.TRUE
"""

from licensekit.matchers._composite import AndMatcher, MatcherRef, NotMatcher, OrMatcher
from licensekit.matchers._copyright import CopyrightMatcher
from licensekit.matchers._spdx import SpdxMatcher, spdx_identifiers
from licensekit.matchers._text import FullTextMatcher, SimpleTextMatcher, create_text_matcher, prune
from licensekit.matchers._types import (
    AbstractMatcher,
    Matcher,
    State,
    combine_all,
    combine_any,
    finalize,
    invert,
    latch,
)

__all__ = [
    'AbstractMatcher',
    'AndMatcher',
    'CopyrightMatcher',
    'FullTextMatcher',
    'Matcher',
    'MatcherRef',
    'NotMatcher',
    'OrMatcher',
    'SimpleTextMatcher',
    'SpdxMatcher',
    'State',
    'combine_all',
    'combine_any',
    'create_text_matcher',
    'finalize',
    'invert',
    'latch',
    'prune',
    'spdx_identifiers',
]
