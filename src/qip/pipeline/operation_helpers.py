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

from typing import Sequence

import numpy as np

from qip.pipeline.errors import CircuitError


def check_matrix_dimensions(matrix: np.ndarray, targets: Sequence[int]) -> None:
    """Checks that the matrix is square and has the right dimension for the number of targets.

    Args:
        matrix (np.ndarray): matrix to check
        targets (Sequence[int]): target wires the matrix acts on

    Raises:
        CircuitError: If the matrix is not a `2 ** len(targets)` square matrix
    """
    expected = 2 ** len(targets)
    if matrix.ndim != 2 or matrix.shape != (expected, expected):
        raise CircuitError(
            f"Matrix of shape {matrix.shape} cannot act on {len(targets)} wires; "
            f"expected shape {(expected, expected)}"
        )


def check_unitary(matrix: np.ndarray) -> None:
    """Checks that the given matrix is unitary.

    Args:
        matrix (np.ndarray): matrix to check

    Raises:
        CircuitError: If the matrix is not unitary
    """
    if not np.allclose(matrix @ matrix.T.conj(), np.eye(len(matrix))):
        raise CircuitError(f"{matrix} is not unitary")


def check_orthonormal(matrix: np.ndarray) -> None:
    """Checks that the given matrix is real and orthonormal.

    Args:
        matrix (np.ndarray): matrix to check

    Raises:
        CircuitError: If the matrix has complex entries or is not orthonormal
    """
    if np.iscomplexobj(matrix):
        raise CircuitError(f"{matrix} is not a real matrix")
    if not np.allclose(matrix @ matrix.T, np.eye(len(matrix))):
        raise CircuitError(f"{matrix} is not orthonormal")
