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

from qip.pipeline._version import __version__  # noqa: F401
from qip.pipeline.builder import ConditionedBuilder, OpBuilder, UnitaryBuilder  # noqa: F401
from qip.pipeline.errors import CircuitError  # noqa: F401
from qip.pipeline.linearizer import Linearization, linearize  # noqa: F401
from qip.pipeline.operation import (  # noqa: F401
    ControlledOp,
    MatrixOp,
    QubitOp,
    RealMatrixOp,
    SwapOp,
)
from qip.pipeline.register import Owned, Register, Shared  # noqa: F401
from qip.pipeline.runner import dense_state_builder, run, run_with_state  # noqa: F401
from qip.pipeline.simulation import DenseQuantumState, QuantumState  # noqa: F401
