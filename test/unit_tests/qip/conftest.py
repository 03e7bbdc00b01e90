# Copyright Amazon.com Inc. or its affiliates. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License"). You
# may not use this file except in compliance with the License. A copy of
# the License is located at
#
#     http://aws.amazon.com/apache2.0/
#
# or in the "license" file accompanying this file. This file is
# distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF
# ANY KIND, either express or implied. See the License for the specific
# language governing permissions and limitations under the License.

import numba as nb
import pytest


@pytest.fixture(autouse=True)
def _set_thresholds_for_all_tests(monkeypatch):
    """Automatically set thresholds for faster testing"""
    monkeypatch.setattr("qip.pipeline.linalg_utils._QUBIT_THRESHOLD", nb.int32(5))
