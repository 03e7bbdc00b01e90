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

from logging import Logger, getLogger
from typing import Callable, List, Optional, TypeVar

from qip.pipeline.linearizer import linearize
from qip.pipeline.register import Register
from qip.pipeline.simulation import DenseQuantumState, QuantumState

QS = TypeVar("QS", bound=QuantumState)

StateBuilder = Callable[[List[Register]], QS]


def dense_state_builder(frontier: List[Register]) -> DenseQuantumState:
    """Builds the ground state over every wire of the frontier registers.

    Args:
        frontier (List[Register]): The frontier registers of a circuit.

    Returns:
        DenseQuantumState: The all-zero state over the frontier's wires.

    Raises:
        ValueError: If the frontier wires are not exactly `0, 1, ..., n - 1`.
    """
    indices = sorted(index for register in frontier for index in register.indices)
    qubit_count = len(indices)
    if indices != list(range(qubit_count)):
        raise ValueError(
            f"Non-contiguous qubit indices supplied; frontier wires {indices} "
            f"must be exactly 0 to {qubit_count - 1}"
        )
    return DenseQuantumState(qubit_count)


def run(register: Register, logger: Optional[Logger] = None) -> DenseQuantumState:
    """Simulates the circuit that produced `register`, starting from the ground state.

    Args:
        register (Register): The terminal register of the circuit.
        logger (Optional[Logger]): Logger for simulation progress. Default is the module logger.

    Returns:
        DenseQuantumState: The final state of the circuit.
    """
    return run_with_state(register, dense_state_builder, logger)


def run_with_state(
    register: Register, state_builder: StateBuilder, logger: Optional[Logger] = None
) -> QS:
    """Simulates the circuit that produced `register` on a state built from its frontier.

    Operations are applied strictly in order; each one sees the result of the previous one.

    Args:
        register (Register): The terminal register of the circuit.
        state_builder (StateBuilder): Maps the frontier registers to the initial state.
        logger (Optional[Logger]): Logger for simulation progress. Default is the module logger.

    Returns:
        QuantumState: The state returned by `state_builder`, evolved by every operation.
    """
    logger = logger or getLogger(__name__)
    frontier, operations = linearize(register, logger)
    state = state_builder(frontier)
    for operation in operations:
        logger.debug(f"Applying {operation}")
        state.apply(operation)
    return state
