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

import numpy as np
import pytest

from qip.pipeline.errors import CircuitError
from qip.pipeline.operation import ControlledOp, MatrixOp, QubitOp, RealMatrixOp, SwapOp
from qip.pipeline.operation_helpers import (
    check_matrix_dimensions,
    check_orthonormal,
    check_unitary,
)

X = np.array([[0, 1], [1, 0]], dtype=complex)


def test_qubit_op_is_abstract():
    with pytest.raises(TypeError):
        QubitOp()


def test_matrix_op():
    op = MatrixOp("X", [3], X, "pauli_x")
    assert op.name == "X"
    assert op.targets == (3,)
    assert op.gate_type == "pauli_x"
    assert op.matrix.dtype == complex
    assert repr(op) == "MatrixOp(name='X', targets=(3,))"


def test_real_matrix_op():
    op = RealMatrixOp("flip", (0,), [[0, 1], [1, 0]])
    assert op.matrix.dtype == float
    assert op.gate_type is None


def test_swap_op_single_wires():
    op = SwapOp("swap", [0], [2])
    assert op.targets == (0, 2)
    assert op.gate_type == "swap"
    assert np.array_equal(
        op.matrix, [[1, 0, 0, 0], [0, 0, 1, 0], [0, 1, 0, 0], [0, 0, 0, 1]]
    )


def test_swap_op_wire_groups():
    op = SwapOp("swap", [0, 1], [2, 3])
    matrix = op.matrix
    assert matrix.shape == (16, 16)
    assert matrix[0b1101, 0b0111] == 1
    assert np.allclose(matrix @ matrix, np.eye(16))


def test_swap_op_mismatched_groups():
    with pytest.raises(ValueError):
        SwapOp("swap", [0, 1], [2])


def test_controlled_op():
    op = ControlledOp([2], MatrixOp("X", [0], X))
    assert op.name == "CX"
    assert op.controls == (2,)
    assert op.targets == (2, 0)
    assert op.gate_type is None
    assert np.allclose(
        op.matrix, [[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 0, 1], [0, 0, 1, 0]]
    )


def test_controlled_real_op():
    op = ControlledOp([1, 2], RealMatrixOp("flip", [0], [[0, 1], [1, 0]]))
    assert op.targets == (1, 2, 0)
    assert op.matrix.shape == (8, 8)
    assert op.matrix[7, 6] == 1


def test_check_matrix_dimensions():
    check_matrix_dimensions(np.eye(4), (0, 1))
    with pytest.raises(CircuitError):
        check_matrix_dimensions(np.eye(2), (0, 1))
    with pytest.raises(CircuitError):
        check_matrix_dimensions(np.ones(4), (0, 1))


def test_check_unitary():
    check_unitary(X)
    with pytest.raises(CircuitError):
        check_unitary(np.array([[1, 1], [0, 1]]))


def test_check_orthonormal():
    check_orthonormal(np.array([[0.0, 1.0], [1.0, 0.0]]))
    with pytest.raises(CircuitError):
        check_orthonormal(X)
    with pytest.raises(CircuitError):
        check_orthonormal(np.array([[1.0, 1.0], [0.0, 1.0]]))
