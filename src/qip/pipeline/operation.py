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

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

import numpy as np

from qip.pipeline.linalg_utils import controlled_matrix


class QubitOp(ABC):
    """
    Encapsulates a named unitary (or real orthonormal) transform acting on a set of target wires.

    The linearizer treats operations as opaque payload; only the state engine reads
    `targets` and `matrix`.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """str: The name of the operation."""

    @property
    @abstractmethod
    def targets(self) -> Tuple[int, ...]:
        """Tuple[int, ...]: The global indices of the wires the operation applies to."""

    @property
    @abstractmethod
    def matrix(self) -> np.ndarray:
        """np.ndarray: The matrix representation of the operation, of dimension
        `2 ** len(targets)`, with the first target as the most significant bit."""

    @property
    def gate_type(self) -> Optional[str]:
        """Optional[str]: Identifier used to dispatch to a specialized kernel, if any."""
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, targets={self.targets})"


class MatrixOp(QubitOp):
    """A complex unitary matrix applied to the target wires."""

    def __init__(
        self, name: str, targets: Sequence[int], matrix, gate_type: Optional[str] = None
    ):
        self._name = name
        self._targets = tuple(targets)
        self._matrix = np.array(matrix, dtype=complex)
        self._gate_type = gate_type

    @property
    def name(self) -> str:
        return self._name

    @property
    def targets(self) -> Tuple[int, ...]:
        return self._targets

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix

    @property
    def gate_type(self) -> Optional[str]:
        return self._gate_type


class RealMatrixOp(QubitOp):
    """A real orthonormal matrix applied to the target wires."""

    def __init__(self, name: str, targets: Sequence[int], matrix):
        self._name = name
        self._targets = tuple(targets)
        self._matrix = np.array(matrix, dtype=float)

    @property
    def name(self) -> str:
        return self._name

    @property
    def targets(self) -> Tuple[int, ...]:
        return self._targets

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix


class SwapOp(QubitOp):
    """Exchanges the states of two equally sized groups of wires."""

    def __init__(self, name: str, targets_a: Sequence[int], targets_b: Sequence[int]):
        if len(targets_a) != len(targets_b):
            raise ValueError(
                f"Cannot swap {len(targets_a)} wires with {len(targets_b)} wires"
            )
        self._name = name
        self._targets_a = tuple(targets_a)
        self._targets_b = tuple(targets_b)

    @property
    def name(self) -> str:
        return self._name

    @property
    def targets(self) -> Tuple[int, ...]:
        return self._targets_a + self._targets_b

    @property
    def targets_a(self) -> Tuple[int, ...]:
        return self._targets_a

    @property
    def targets_b(self) -> Tuple[int, ...]:
        return self._targets_b

    @property
    def matrix(self) -> np.ndarray:
        width = len(self._targets_a)
        low_mask = (1 << width) - 1
        dimension = 1 << (2 * width)
        matrix = np.zeros((dimension, dimension), dtype=complex)
        for index in range(dimension):
            swapped = ((index & low_mask) << width) | (index >> width)
            matrix[swapped, index] = 1
        return matrix

    @property
    def gate_type(self) -> str:
        return "swap"


class ControlledOp(QubitOp):
    """
    Applies `operation` on the subspace where every control wire is in the `|1⟩` state.

    The controls are prepended to the targets of the wrapped operation, and the matrix
    is the controlled form of the wrapped operation's matrix.
    """

    def __init__(self, controls: Sequence[int], operation: QubitOp):
        self._controls = tuple(controls)
        self._operation = operation
        self._matrix = controlled_matrix(
            np.asarray(operation.matrix, dtype=complex), (1,) * len(self._controls)
        )

    @property
    def name(self) -> str:
        return f"C{self._operation.name}"

    @property
    def controls(self) -> Tuple[int, ...]:
        return self._controls

    @property
    def operation(self) -> QubitOp:
        return self._operation

    @property
    def targets(self) -> Tuple[int, ...]:
        return self._controls + self._operation.targets

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix
