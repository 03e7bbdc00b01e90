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
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from qip.pipeline.errors import CircuitError
from qip.pipeline.operation import ControlledOp, MatrixOp, QubitOp, RealMatrixOp, SwapOp
from qip.pipeline.operation_helpers import (
    check_matrix_dimensions,
    check_orthonormal,
    check_unitary,
)
from qip.pipeline.register import Owned, Register, Shared

_X_MATRIX = np.array([[0, 1], [1, 0]], dtype=complex)
_Y_MATRIX = np.array([[0, -1j], [1j, 0]], dtype=complex)
_Z_MATRIX = np.array([[1, 0], [0, -1]], dtype=complex)
_HADAMARD_MATRIX = np.array([[1, 1], [1, -1]], dtype=complex) / np.sqrt(2)


class UnitaryBuilder(ABC):
    """
    Records the provenance of registers as gates are applied to them.

    Gates never modify a register; each returns a new register whose parent descriptor
    points back at the registers it was made from. Registers passed to a gate must not be
    used again.
    """

    @abstractmethod
    def merge(self, registers: Sequence[Register]) -> Register:
        """Joins registers into one register holding all of their wires, in order."""

    @abstractmethod
    def split(
        self, register: Register, positions: Iterable[int]
    ) -> Tuple[Register, Register]:
        """Splits a register into the wires at `positions` and the remaining wires.

        `positions` are offsets into `register.indices`, not wire indices.
        """

    @abstractmethod
    def split_all(self, register: Register) -> List[Register]:
        """Splits a register into one register per wire."""

    @abstractmethod
    def apply_op(self, register: Register, operation: QubitOp) -> Register:
        """Returns a register holding the state of `register` after `operation`."""

    def mat(self, name: str, register: Register, matrix) -> Register:
        """Applies a unitary matrix to the register.

        A 2x2 matrix applied to a register of several wires is applied to each wire.

        Raises:
            CircuitError: If the matrix has the wrong dimension or is not unitary.
        """
        matrix = np.array(matrix, dtype=complex)
        if matrix.shape == (2, 2) and len(register) > 1:
            return self._broadcast(register, lambda r: self.mat(name, r, matrix))
        check_matrix_dimensions(matrix, register.indices)
        check_unitary(matrix)
        return self.apply_op(register, MatrixOp(name, register.indices, matrix))

    def real_mat(self, name: str, register: Register, matrix) -> Register:
        """Applies a real orthonormal matrix to the register.

        A 2x2 matrix applied to a register of several wires is applied to each wire.

        Raises:
            CircuitError: If the matrix has the wrong dimension or is not orthonormal.
        """
        matrix = np.array(matrix)
        if matrix.shape == (2, 2) and len(register) > 1:
            return self._broadcast(register, lambda r: self.real_mat(name, r, matrix))
        check_matrix_dimensions(matrix, register.indices)
        check_orthonormal(matrix)
        return self.apply_op(register, RealMatrixOp(name, register.indices, matrix))

    def not_(self, register: Register) -> Register:
        return self._gate("not", register, _X_MATRIX, "pauli_x")

    def x(self, register: Register) -> Register:
        return self._gate("X", register, _X_MATRIX, "pauli_x")

    def y(self, register: Register) -> Register:
        return self._gate("Y", register, _Y_MATRIX, "pauli_y")

    def z(self, register: Register) -> Register:
        return self._gate("Z", register, _Z_MATRIX, "pauli_z")

    def hadamard(self, register: Register) -> Register:
        return self._gate("H", register, _HADAMARD_MATRIX, "hadamard")

    def swap(self, register_a: Register, register_b: Register) -> Tuple[Register, Register]:
        """Exchanges the states of two registers of the same size.

        Raises:
            CircuitError: If the registers have different sizes.
        """
        if len(register_a) != len(register_b):
            raise CircuitError(
                f"Cannot swap registers of {len(register_a)} and {len(register_b)} wires"
            )
        operation = SwapOp("swap", register_a.indices, register_b.indices)
        merged = self.apply_op(self.merge([register_a, register_b]), operation)
        return self.split(merged, range(len(register_a)))

    def with_condition(self, register: Register) -> ConditionedBuilder:
        """Returns a builder whose gates only act where every wire of `register` is 1."""
        return ConditionedBuilder(self, register)

    def _gate(
        self, name: str, register: Register, matrix: np.ndarray, gate_type: str
    ) -> Register:
        if len(register) > 1:
            return self._broadcast(register, lambda r: self._gate(name, r, matrix, gate_type))
        return self.apply_op(register, MatrixOp(name, register.indices, matrix, gate_type))

    def _broadcast(self, register: Register, gate: Callable[[Register], Register]) -> Register:
        return self.merge([gate(r) for r in self.split_all(register)])


class OpBuilder(UnitaryBuilder):
    """
    Allocates registers and records the operations applied to them.

    Ids and wire indices are handed out in increasing order, so every register has a
    larger id than the registers it was derived from.
    """

    def __init__(self):
        self._next_id = 0
        self._next_wire = 0

    @property
    def qubit_count(self) -> int:
        """int: The number of wires allocated so far."""
        return self._next_wire

    def register(self, n: int) -> Register:
        """Allocates a register of `n` new wires, all starting in the `|0⟩` state.

        Raises:
            CircuitError: If `n` is less than 1.
        """
        if n < 1:
            raise CircuitError(f"Register must have at least one wire, got {n}")
        indices = range(self._next_wire, self._next_wire + n)
        self._next_wire += n
        return Register(self._new_id(), indices)

    def qubit(self) -> Register:
        return self.register(1)

    def merge(self, registers: Sequence[Register]) -> Register:
        return self._merge_with_op(registers, None)

    def split(
        self, register: Register, positions: Iterable[int]
    ) -> Tuple[Register, Register]:
        positions = list(positions)
        if len(set(positions)) != len(positions):
            raise CircuitError(f"Duplicate positions in {positions}")
        if any(p < 0 or p >= len(register) for p in positions):
            raise CircuitError(
                f"Positions {positions} out of range for register of {len(register)} wires"
            )
        if not positions or len(positions) == len(register):
            raise CircuitError("Both parts of a split must hold at least one wire")
        selected = [register.indices[p] for p in positions]
        remaining = [index for index in register.indices if index not in selected]
        shared = Shared(register)
        return Register(self._new_id(), selected, shared), Register(
            self._new_id(), remaining, shared
        )

    def split_all(self, register: Register) -> List[Register]:
        if len(register) == 1:
            return [register]
        shared = Shared(register)
        return [Register(self._new_id(), (index,), shared) for index in register.indices]

    def apply_op(self, register: Register, operation: QubitOp) -> Register:
        return self._merge_with_op([register], operation)

    def _merge_with_op(
        self, registers: Sequence[Register], operation: Optional[QubitOp]
    ) -> Register:
        registers = list(registers)
        if not registers:
            raise CircuitError("Cannot merge an empty list of registers")
        indices = [index for register in registers for index in register.indices]
        if len(set(indices)) != len(indices):
            raise CircuitError(f"Registers {registers} share wires")
        return Register(self._new_id(), indices, Owned(registers, operation))

    def _new_id(self) -> int:
        new_id = self._next_id
        self._next_id += 1
        return new_id


class ConditionedBuilder(UnitaryBuilder):
    """
    Wraps a builder so every operation only acts where the control register is all ones.

    The control register is merged with each target, the controlled operation is applied,
    and the result is split back apart, so the control can be reused by later operations.
    Use it as a context manager and collect the control register with `release_register()`:

        with builder.with_condition(control) as conditioned:
            target = conditioned.not_(target)
        control = conditioned.release_register()
    """

    def __init__(self, builder: UnitaryBuilder, register: Register):
        self._builder = builder
        self._register = register
        self._released = False

    def __enter__(self) -> ConditionedBuilder:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self._released = True

    def merge(self, registers: Sequence[Register]) -> Register:
        return self._builder.merge(registers)

    def split(
        self, register: Register, positions: Iterable[int]
    ) -> Tuple[Register, Register]:
        return self._builder.split(register, positions)

    def split_all(self, register: Register) -> List[Register]:
        return self._builder.split_all(register)

    def apply_op(self, register: Register, operation: QubitOp) -> Register:
        if self._released:
            raise CircuitError("Conditioned builder has already been released")
        control = self._register
        merged = self._builder.merge([control, register])
        merged = self._builder.apply_op(merged, ControlledOp(control.indices, operation))
        self._register, register = self._builder.split(merged, range(len(control)))
        return register

    def release_register(self) -> Register:
        """Ends the conditioned scope and returns the control register."""
        self._released = True
        return self._register
