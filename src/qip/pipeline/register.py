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

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from qip.pipeline.operation import QubitOp


@dataclass(frozen=True, eq=False)
class Register:
    """
    A group of one or more wires together with the provenance that produced them.

    Registers form a directed acyclic graph through their `parent` descriptors.
    Registers with no parent are frontier registers; they make up the initial state.
    """

    id: int
    indices: Tuple[int, ...]
    parent: Optional[Parent] = None

    def __post_init__(self):
        object.__setattr__(self, "indices", tuple(self.indices))

    def __len__(self) -> int:
        return len(self.indices)

    def __eq__(self, other) -> bool:
        if isinstance(other, Register):
            return self.id == other.id
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.id)

    def __lt__(self, other: Register) -> bool:
        return self.id < other.id

    def __repr__(self) -> str:
        return f"Register(id={self.id}, indices={self.indices})"

    @property
    def is_frontier(self) -> bool:
        """bool: Whether this register is an original wire group with no parent."""
        return self.parent is None


@dataclass(frozen=True, eq=False)
class Owned:
    """
    Parent descriptor for a register obtained by applying `operation` to the
    concatenation of `registers`. The child is the only live reference to its parents.

    `operation` is None for pure reshaping, such as merging registers.
    """

    registers: Tuple[Register, ...]
    operation: Optional[QubitOp] = None

    def __post_init__(self):
        object.__setattr__(self, "registers", tuple(self.registers))


@dataclass(frozen=True, eq=False)
class Shared:
    """Parent descriptor for a register that aliases `register` without consuming it."""

    register: Register


Parent = Union[Owned, Shared]
