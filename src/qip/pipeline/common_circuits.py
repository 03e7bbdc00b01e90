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

"""Common circuits for general usage."""

from typing import Any, Callable, Sequence, Tuple, TypeVar

from qip.pipeline.builder import OpBuilder, UnitaryBuilder
from qip.pipeline.errors import CircuitError
from qip.pipeline.register import Register

RS = TypeVar("RS")
OS = TypeVar("OS")


def condition(
    builder: UnitaryBuilder,
    register: Register,
    registers: RS,
    f: Callable[[UnitaryBuilder, RS], OS],
) -> Tuple[Register, OS]:
    """Conditions the circuit built by `f` on `register`.

    Args:
        builder (UnitaryBuilder): The builder to build the circuit with.
        register (Register): The control register.
        registers: The registers passed on to `f`.
        f (Callable): Builds the circuit on the registers with the conditioned builder it is
            given, and returns its output registers.

    Returns:
        Tuple[Register, Any]: The control register and the output of `f`.
    """
    with builder.with_condition(register) as conditioned:
        result = f(conditioned, registers)
    return conditioned.release_register(), result


def cx(builder: UnitaryBuilder, cr: Register, r: Register) -> Tuple[Register, Register]:
    """A controlled X, using `cr` as control and `r` as input."""
    return condition(builder, cr, r, lambda b, r: b.x(r))


def cy(builder: UnitaryBuilder, cr: Register, r: Register) -> Tuple[Register, Register]:
    """A controlled Y, using `cr` as control and `r` as input."""
    return condition(builder, cr, r, lambda b, r: b.y(r))


def cz(builder: UnitaryBuilder, cr: Register, r: Register) -> Tuple[Register, Register]:
    """A controlled Z, using `cr` as control and `r` as input."""
    return condition(builder, cr, r, lambda b, r: b.z(r))


def cnot(builder: UnitaryBuilder, cr: Register, r: Register) -> Tuple[Register, Register]:
    """A controlled not, using `cr` as control and `r` as input."""
    return condition(builder, cr, r, lambda b, r: b.not_(r))


def cswap(
    builder: UnitaryBuilder, cr: Register, ra: Register, rb: Register
) -> Tuple[Register, Register, Register]:
    """Swaps `ra` and `rb`, controlled by `cr`."""
    cr, (ra, rb) = condition(builder, cr, (ra, rb), lambda b, rs: b.swap(*rs))
    return cr, ra, rb


def cmat(
    builder: UnitaryBuilder, name: str, cr: Register, r: Register, matrix: Any
) -> Tuple[Register, Register]:
    """Applies a unitary matrix to `r`, controlled by `cr`. A 2x2 matrix is applied to each wire."""
    return condition(builder, cr, r, lambda b, r: b.mat(name, r, matrix))


def crealmat(
    builder: UnitaryBuilder, name: str, cr: Register, r: Register, matrix: Sequence
) -> Tuple[Register, Register]:
    """Applies an orthonormal matrix to `r`, controlled by `cr`. A 2x2 matrix is applied to
    each wire."""
    return condition(builder, cr, r, lambda b, r: b.real_mat(name, r, matrix))


def epr_pair(builder: OpBuilder, n: int) -> Tuple[Register, Register]:
    """Makes a pair of registers of `n` wires each in the state `|0n>x|0n> + |1n>x|1n>`.

    Raises:
        CircuitError: If `n` is less than 1.
    """
    if n < 1:
        raise CircuitError(f"EPR pair registers must have at least one wire, got {n}")
    m = 2 * n

    r = builder.register(1)
    rs = builder.register(m - 1)

    r = builder.hadamard(r)
    r, rs = condition(builder, r, rs, lambda b, rs: b.not_(rs))

    all_rs = [r, *builder.split_all(rs)]
    return builder.merge(all_rs[:n]), builder.merge(all_rs[n:])
