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

import pytest

from qip.pipeline import config


@pytest.mark.parametrize(
    "value, expected", [(None, 10), ("", 10), ("  ", 10), ("3", 3), ("many", 10)]
)
def test_int_from_env(monkeypatch, value, expected):
    if value is None:
        monkeypatch.delenv("QIP_QUBIT_THRESHOLD", raising=False)
    else:
        monkeypatch.setenv("QIP_QUBIT_THRESHOLD", value)
    assert config._int_from_env("QIP_QUBIT_THRESHOLD", config.DEFAULT_QUBIT_THRESHOLD) == expected
