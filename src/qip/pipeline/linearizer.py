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

import heapq
from collections import deque
from logging import Logger, getLogger
from typing import List, NamedTuple, Optional

from qip.pipeline.operation import QubitOp
from qip.pipeline.register import Owned, Register, Shared


class Linearization(NamedTuple):
    """The frontier registers of a circuit and its operations in application order."""

    frontier: List[Register]
    operations: List[QubitOp]


def linearize(register: Register, logger: Optional[Logger] = None) -> Linearization:
    """Walks the provenance graph backward from `register`.

    Registers are visited from the highest id to the lowest, so the result is the same on
    every run. Every register reachable from `register` is expanded exactly once, no matter
    how many shared aliases point to it. Operations are discovered from the last applied to
    the first, and pushed to the front of the queue to come out in application order.

    The graph is trusted to be acyclic; a cycle makes the traversal loop forever.

    Args:
        register (Register): The terminal register of the circuit.
        logger (Optional[Logger]): Logger for traversal progress. Default is the module logger.

    Returns:
        Linearization: The frontier registers, in the order they were reached, and the
        operations to apply to them, in application order.
    """
    logger = logger or getLogger(__name__)

    heap = []
    pending = set()
    visited = set()
    frontier = []
    operations = deque()

    def push(r: Register) -> None:
        if r.id in visited or r.id in pending:
            return
        pending.add(r.id)
        heapq.heappush(heap, (-r.id, r))

    push(register)
    while heap:
        _, current = heapq.heappop(heap)
        pending.discard(current.id)
        visited.add(current.id)

        parent = current.parent
        if parent is None:
            frontier.append(current)
        elif isinstance(parent, Owned):
            if parent.operation is not None:
                operations.appendleft(parent.operation)
            for r in parent.registers:
                push(r)
        elif isinstance(parent, Shared):
            push(parent.register)
        else:
            raise TypeError(f"Unrecognized parent descriptor: {parent}")

    logger.debug(
        f"Linearized register {register.id}: {len(frontier)} frontier registers, "
        f"{len(operations)} operations"
    )
    return Linearization(frontier, list(operations))
