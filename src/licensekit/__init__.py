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

"""licensekit: declarative license header matching.

Rule documents declare license families, the matcher tree that
recognizes each one and which families are approved.  Source file
headers are fed line by line through the matchers and the recognized
family is checked against the approval policy.
"""

from licensekit.analysis import DEFAULT_HEADER_LINES, HeaderAnalyser, HeaderMatch
from licensekit.defaults import Engine, build_engine, default_reader
from licensekit.errors import ConfigurationError
from licensekit.license import License, LicenseBuilder, LicenseFamily
from licensekit.matchers import Matcher, State
from licensekit.policy import ApprovalPolicy
from licensekit.reader import ConfigurationReader

__version__ = '0.1.0'

__all__ = [
    'DEFAULT_HEADER_LINES',
    'ApprovalPolicy',
    'ConfigurationError',
    'ConfigurationReader',
    'Engine',
    'HeaderAnalyser',
    'HeaderMatch',
    'License',
    'LicenseBuilder',
    'LicenseFamily',
    'Matcher',
    'State',
    '__version__',
    'build_engine',
    'default_reader',
]
