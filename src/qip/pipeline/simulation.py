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

from typing import Iterable, Optional, Sequence

import numpy as np

from qip.pipeline.linalg_utils import QuantumGateDispatcher, multiply_matrix
from qip.pipeline.operation import QubitOp


class QuantumState:
    """
    This class tracks the state of a quantum system with `qubit_count` qubits.
    The state evolves by application of `QubitOp`s using the `apply()` method.

    Subclasses may represent the state densely, sparsely or otherwise, as long as
    applying an operation has the same effect on the amplitudes.
    """

    def __init__(self, qubit_count: int):
        r"""
        Args:
            qubit_count (int): The number of qubits being simulated.
        """
        self._qubit_count = qubit_count

    def apply(self, operation: QubitOp) -> None:
        """Mutates the state to reflect the application of the given operation.

        Args:
            operation (QubitOp): Operation to apply.
        """
        raise NotImplementedError("apply is not implemented.")

    def evolve(self, operations: Iterable[QubitOp]) -> None:
        """Applies the given operations one at a time, in order.

        Args:
            operations (Iterable[QubitOp]): Operations to apply.

        Note:
            This method mutates the state.
        """
        for operation in operations:
            self.apply(operation)

    @property
    def qubit_count(self) -> int:
        """int: The number of qubits being simulated."""
        return self._qubit_count

    @property
    def probabilities(self) -> np.ndarray:
        """np.ndarray: The probabilities of each computational basis state."""
        raise NotImplementedError("probabilities is not implemented.")


class DenseQuantumState(QuantumState):
    """
    Dense state vector of `2 ** qubit_count` complex amplitudes.

    Qubit `i` is the `i`-th most significant bit of an amplitude's index. Each operation is
    written from the current buffer into a scratch buffer of the same size, after which
    the buffers trade places. Above the dispatcher's qubit threshold the amplitude updates
    are spread over numba worker threads.
    """

    def __init__(self, qubit_count: int, parallel_threshold: Optional[int] = None):
        r"""
        Args:
            qubit_count (int): The number of qubits being simulated.
                All the qubits start in the :math:`\ket{\mathbf{0}}` computational basis state.
            parallel_threshold (Optional[int]): Qubit count above which operations are applied
                by the multithreaded kernels. Default is the configured threshold.
        """
        super().__init__(qubit_count)
        initial_state = np.zeros(2**qubit_count, dtype=complex)
        initial_state[0] = 1
        self._state_vector = np.reshape(initial_state, [2] * qubit_count)
        self._scratch = np.zeros_like(self._state_vector)
        self._dispatcher = QuantumGateDispatcher(qubit_count, parallel_threshold)

    @classmethod
    def from_amplitudes(
        cls, amplitudes: Sequence[complex], parallel_threshold: Optional[int] = None
    ) -> DenseQuantumState:
        """Creates a state holding a copy of the given amplitudes.

        Args:
            amplitudes (Sequence[complex]): Flat vector of amplitudes whose length is a power of 2.
            parallel_threshold (Optional[int]): Qubit count above which operations are applied
                by the multithreaded kernels. Default is the configured threshold.

        Returns:
            DenseQuantumState: The state with the given amplitudes.

        Raises:
            ValueError: If the number of amplitudes is not a power of 2.
        """
        vector = np.array(amplitudes, dtype=complex).reshape(-1)
        qubit_count = int(np.log2(vector.size)) if vector.size else 0
        if vector.size == 0 or 2**qubit_count != vector.size:
            raise ValueError(
                f"State vector length {vector.size} is not a power of 2 "
                "and cannot represent qubits"
            )
        state = cls(qubit_count, parallel_threshold)
        np.copyto(state._state_vector, vector.reshape([2] * qubit_count))
        return state

    def apply(self, operation: QubitOp) -> None:
        multiply_matrix(
            self._state_vector,
            operation.matrix,
            operation.targets,
            self._scratch,
            self._dispatcher,
            operation.gate_type,
        )
        self._state_vector, self._scratch = self._scratch, self._state_vector

    @property
    def is_parallel(self) -> bool:
        """bool: Whether operations are applied by the multithreaded kernels."""
        return self._dispatcher.use_large

    @property
    def state_vector(self) -> np.ndarray:
        """
        np.ndarray: The state vector specifying the current state of the simulation.

        Note:
            Mutating this array will not mutate the state.
        """
        return np.reshape(self._state_vector, 2**self._qubit_count).copy()

    @property
    def probabilities(self) -> np.ndarray:
        """np.ndarray: The probabilities of each computational basis state of the current state
        vector of the simulation.
        """
        return np.abs(self.state_vector) ** 2

    def amplitude(self, bitstring: str) -> complex:
        """Returns the amplitude of the basis state labelled by `bitstring`, qubit 0 first.

        Args:
            bitstring (str): One character, "0" or "1", per qubit.

        Returns:
            complex: The amplitude of the basis state.

        Raises:
            ValueError: If the bitstring does not label a basis state of this state.
        """
        if len(bitstring) != self._qubit_count or set(bitstring) - {"0", "1"}:
            raise ValueError(
                f"Bitstring {bitstring!r} does not label a basis state of "
                f"{self._qubit_count} qubits"
            )
        return complex(self._state_vector[tuple(int(bit) for bit in bitstring)])
