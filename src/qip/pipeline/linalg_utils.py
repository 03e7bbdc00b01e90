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

from collections.abc import Sequence

import numba as nb
import numpy as np
import opt_einsum
from scipy.linalg import block_diag

from qip.pipeline.config import QUBIT_THRESHOLD

nb.config.NUMBA_OPT = 3
nb.config.NUMBA_SLP_VECTORIZE = 1
nb.config.THREADING_LAYER = "workqueue"

_NO_CONTROL_SLICE = slice(None)

BASIS_MAPPING = {0: (0, 0), 1: (0, 1), 2: (1, 0), 3: (1, 1)}

_QUBIT_THRESHOLD = nb.int32(QUBIT_THRESHOLD)

DIAGONAL_GATES = frozenset({"identity", "pauli_z", "s", "t", "phaseshift"})


class QuantumGateDispatcher:
    def __init__(self, n_qubits: int, threshold: int | None = None):
        """
        Dispatcher for performance-optimized implementations of quantum gates. It selects
        between small-circuit (NumPy-based, single threaded) and large-circuit (Numba JIT-compiled,
        multithreaded) implementations based on the number of qubits in a circuit.

        Args:
            n_qubits (int): The number of qubits of the state the gates are applied to.
            threshold (int | None): Qubit count above which the multithreaded kernels are used.
                Default is the module-level threshold.
        """
        self.n_qubits = n_qubits
        self.threshold = _QUBIT_THRESHOLD if threshold is None else threshold
        self.use_large = n_qubits > self.threshold

        if self.use_large:
            self.apply_single_qubit_gate = _apply_single_qubit_gate_large
            self.apply_diagonal_gate = _apply_diagonal_gate_large
            self.apply_two_qubit_gate = _apply_two_qubit_gate_large
            self.apply_swap = _apply_swap_large
            self.apply_multi_qubit_gate = _apply_multi_qubit_gate_large
        else:
            self.apply_single_qubit_gate = _apply_single_qubit_gate_small
            self.apply_diagonal_gate = _apply_diagonal_gate_small
            self.apply_two_qubit_gate = _apply_two_qubit_gate_small
            self.apply_swap = _apply_swap_small
            self.apply_multi_qubit_gate = _apply_multi_qubit_gate_small


def multiply_matrix(
    state: np.ndarray,
    matrix: np.ndarray,
    targets: tuple[int, ...],
    out: np.ndarray | None = None,
    dispatcher: QuantumGateDispatcher | None = None,
    gate_type: str | None = None,
) -> np.ndarray:
    """Multiplies the given matrix by the given state, applying the matrix on the target qubits.

    The result is always written to `out`; `state` is only read, so `state` and `out` can be
    used as a pair of ping-pong buffers.

    Args:
        state (np.ndarray): The state to multiply the matrix by, as a `(2,) * n` tensor.
        matrix (np.ndarray): The matrix to apply to the state.
        targets (tuple[int]): The qubits to apply the state on; the first target
            corresponds to the most significant bit of the matrix index.
        out (np.ndarray | None): Preallocated result array, distinct from `state`.
            Default is a newly allocated array.
        dispatcher (QuantumGateDispatcher | None): Dispatch to optimized functions based on
            qubit count. Default is a dispatcher for the number of qubits of `state`.
        gate_type (str | None): Explicit gate type identifier for specialized dispatch.

    Returns:
        np.ndarray: `out`, holding the state after the matrix has been applied.
    """
    if dispatcher is None:
        dispatcher = QuantumGateDispatcher(state.ndim)

    if out is None:
        out = np.zeros_like(state, dtype=complex)

    matrix = np.ascontiguousarray(matrix, dtype=complex)
    targets = tuple(targets)

    if gate_type == "swap":
        half = len(targets) // 2
        return dispatcher.apply_swap(state, targets[:half], targets[half:], out)
    if len(targets) == 1:
        if gate_type in DIAGONAL_GATES:
            return dispatcher.apply_diagonal_gate(state, matrix, targets[0], out)
        return dispatcher.apply_single_qubit_gate(state, matrix, targets[0], out)
    if len(targets) == 2:
        return dispatcher.apply_two_qubit_gate(state, matrix, targets[0], targets[1], out)
    return dispatcher.apply_multi_qubit_gate(state, matrix, targets, out)


def _apply_single_qubit_gate_small(
    state: np.ndarray, matrix: np.ndarray, target: int, out: np.ndarray
) -> np.ndarray:
    """Applies single gates using array slicing."""
    shape = state.shape
    before_size = int(np.prod(shape[:target]))
    after_size = int(np.prod(shape[target + 1 :]))

    state_reshaped = state.reshape(before_size, 2, after_size)
    out_reshaped = out.reshape(before_size, 2, after_size)

    state_0 = state_reshaped[:, 0, :]
    state_1 = state_reshaped[:, 1, :]

    a, b, c, d = matrix[0, 0], matrix[0, 1], matrix[1, 0], matrix[1, 1]
    out_reshaped[:, 0, :] = a * state_0 + b * state_1
    out_reshaped[:, 1, :] = c * state_0 + d * state_1

    return out


@nb.njit(parallel=True, fastmath=True, cache=True, nogil=True)
def _apply_single_qubit_gate_large(  # pragma: no cover
    state: np.ndarray, matrix: np.ndarray, target: int, out: np.ndarray
) -> np.ndarray:
    """Applies single gates using bit masking."""
    a, b, c, d = matrix[0, 0], matrix[0, 1], matrix[1, 0], matrix[1, 1]
    n = state.ndim - target - 1
    mask = (np.int64(1) << n) - 1

    half_size = state.size >> 1
    state_flat = state.reshape(-1)
    out_flat = out.reshape(-1)

    for i in nb.prange(half_size):
        idx0 = (i & ~mask) << 1 | (i & mask)
        idx1 = idx0 | (np.int64(1) << n)

        s0, s1 = state_flat[idx0], state_flat[idx1]

        out_flat[idx0] = a * s0 + b * s1
        out_flat[idx1] = c * s0 + d * s1

    return out


def _apply_diagonal_gate_small(
    state: np.ndarray, matrix: np.ndarray, target: int, out: np.ndarray
) -> np.ndarray:
    """
    Applies a diagonal single-qubit gate using array slicing.

    Args:
        state: Input quantum state
        matrix: 2x2 diagonal gate matrix
        target: Target qubit index
        out: Output array

    Returns:
        The output array
    """
    a, d = matrix[0, 0], matrix[1, 1]

    shape = state.shape
    before_size = int(np.prod(shape[:target]))
    after_size = int(np.prod(shape[target + 1 :]))

    state_reshaped = state.reshape(before_size, 2, after_size)
    out_reshaped = out.reshape(before_size, 2, after_size)

    out_reshaped[:, 0, :] = a * state_reshaped[:, 0, :]
    out_reshaped[:, 1, :] = d * state_reshaped[:, 1, :]

    return out


@nb.njit(parallel=True, fastmath=True, cache=True, nogil=True)
def _apply_diagonal_gate_large(  # pragma: no cover
    state: np.ndarray, matrix: np.ndarray, target: int, out: np.ndarray
) -> np.ndarray:
    """Applies a diagonal single-qubit gate using bit masking."""
    a, d = matrix[0, 0], matrix[1, 1]

    target_bit = state.ndim - target - 1
    target_mask = np.int64(1) << target_bit
    shifted_target_mask = target_mask - 1

    half_size = state.size >> 1
    state_flat = state.reshape(-1)
    out_flat = out.reshape(-1)

    for i in nb.prange(half_size):
        idx0 = (i & ~shifted_target_mask) << 1 | (i & shifted_target_mask)
        idx1 = idx0 | target_mask

        out_flat[idx0] = a * state_flat[idx0]
        out_flat[idx1] = d * state_flat[idx1]

    return out


def _apply_two_qubit_gate_small(
    state: np.ndarray,
    matrix: np.ndarray,
    target0: int,
    target1: int,
    out: np.ndarray,
) -> np.ndarray:
    """Two qubit gate application with numpy."""
    n_qubits = state.ndim
    out.fill(0)

    slices = {}
    for bits in BASIS_MAPPING.values():
        slice_list = [_NO_CONTROL_SLICE] * n_qubits
        slice_list[target0] = bits[0]
        slice_list[target1] = bits[1]
        slices[bits] = tuple(slice_list)

    rows, cols = np.nonzero(matrix)

    for k in range(len(rows)):
        i, j = rows[k], cols[k]
        out[slices[BASIS_MAPPING[i]]] += matrix[i, j] * state[slices[BASIS_MAPPING[j]]]

    return out


@nb.njit(parallel=True, fastmath=True, cache=True, nogil=True)
def _apply_two_qubit_gate_large(  # pragma: no cover
    state: np.ndarray,
    matrix: np.ndarray,
    target0: int,
    target1: int,
    out: np.ndarray,
) -> np.ndarray:
    """Two-qubit gate implementation using bit manipulation."""
    n_qubits = state.ndim
    total_size = state.size

    mask_0 = np.int64(1) << (n_qubits - 1 - target0)
    mask_1 = np.int64(1) << (n_qubits - 1 - target1)
    mask_both = mask_0 | mask_1

    state_flat = state.reshape(-1)
    out_flat = out.reshape(-1)

    for i in nb.prange(total_size):
        if (i & mask_both) == 0:
            s0 = state_flat[i]
            s1 = state_flat[i | mask_1]
            s2 = state_flat[i | mask_0]
            s3 = state_flat[i | mask_both]

            out_flat[i] = (
                matrix[0, 0] * s0 + matrix[0, 1] * s1 + matrix[0, 2] * s2 + matrix[0, 3] * s3
            )

            out_flat[i | mask_1] = (
                matrix[1, 0] * s0 + matrix[1, 1] * s1 + matrix[1, 2] * s2 + matrix[1, 3] * s3
            )

            out_flat[i | mask_0] = (
                matrix[2, 0] * s0 + matrix[2, 1] * s1 + matrix[2, 2] * s2 + matrix[2, 3] * s3
            )

            out_flat[i | mask_both] = (
                matrix[3, 0] * s0 + matrix[3, 1] * s1 + matrix[3, 2] * s2 + matrix[3, 3] * s3
            )

    return out


def _apply_swap_small(
    state: np.ndarray, qubits_0: Sequence[int], qubits_1: Sequence[int], out: np.ndarray
) -> np.ndarray:
    """Swap gate implementation using numpy's transpose."""
    axes = list(range(state.ndim))
    for qubit_0, qubit_1 in zip(qubits_0, qubits_1):
        axes[qubit_0], axes[qubit_1] = axes[qubit_1], axes[qubit_0]
    np.copyto(out, np.transpose(state, axes))
    return out


def _apply_swap_large(
    state: np.ndarray, qubits_0: Sequence[int], qubits_1: Sequence[int], out: np.ndarray
) -> np.ndarray:
    """Swap gate implementation using bit manipulation."""
    n_qubits = state.ndim
    positions_0 = np.array([n_qubits - 1 - q for q in qubits_0], dtype=np.int64)
    positions_1 = np.array([n_qubits - 1 - q for q in qubits_1], dtype=np.int64)
    return _swap_kernel(state, positions_0, positions_1, out)


@nb.njit(parallel=True, fastmath=True, cache=True, nogil=True)
def _swap_kernel(
    state: np.ndarray, positions_0: np.ndarray, positions_1: np.ndarray, out: np.ndarray
) -> np.ndarray:  # pragma: no cover
    state_flat = state.reshape(-1)
    out_flat = out.reshape(-1)

    for i in nb.prange(state.size):
        source = np.int64(i)
        for k in range(len(positions_0)):
            bit_0 = (source >> positions_0[k]) & 1
            bit_1 = (source >> positions_1[k]) & 1
            if bit_0 != bit_1:
                source ^= (np.int64(1) << positions_0[k]) | (np.int64(1) << positions_1[k])
        out_flat[i] = state_flat[source]

    return out


def _apply_multi_qubit_gate_small(
    state: np.ndarray, matrix: np.ndarray, targets: tuple[int, ...], out: np.ndarray
) -> np.ndarray:
    """Applies a gate on any number of qubits by tensor contraction."""
    n_qubits = state.ndim
    num_targets = len(targets)
    gate_tensor = np.reshape(matrix, [2] * num_targets * 2)

    contravariant = [*range(n_qubits, n_qubits + num_targets)]
    substitutions = dict(zip(targets, contravariant))
    new_indices = [substitutions.get(i, i) for i in range(n_qubits)]

    product = opt_einsum.contract(
        gate_tensor,
        contravariant + list(targets),
        state,
        [*range(n_qubits)],
        new_indices,
        optimize="auto",
    )
    np.copyto(out, product)
    return out


def _apply_multi_qubit_gate_large(
    state: np.ndarray, matrix: np.ndarray, targets: tuple[int, ...], out: np.ndarray
) -> np.ndarray:
    """Applies a gate on any number of qubits by gathering and scattering amplitude blocks."""
    n_qubits = state.ndim
    positions = np.array([n_qubits - 1 - q for q in targets], dtype=np.int64)
    return _multi_qubit_kernel(state, matrix, positions, out)


@nb.njit(parallel=True, fastmath=True, cache=True, nogil=True)
def _multi_qubit_kernel(
    state: np.ndarray, matrix: np.ndarray, positions: np.ndarray, out: np.ndarray
) -> np.ndarray:  # pragma: no cover
    num_targets = len(positions)
    block_size = 1 << num_targets
    sorted_positions = np.sort(positions)

    offsets = np.zeros(block_size, dtype=np.int64)
    for pattern in range(block_size):
        offset = np.int64(0)
        for k in range(num_targets):
            if (pattern >> (num_targets - 1 - k)) & 1:
                offset |= np.int64(1) << positions[k]
        offsets[pattern] = offset

    state_flat = state.reshape(-1)
    out_flat = out.reshape(-1)
    iterations = state.size >> num_targets

    for i in nb.prange(iterations):
        base = np.int64(i)
        for k in range(num_targets):
            lower_mask = (np.int64(1) << sorted_positions[k]) - 1
            base = (base & lower_mask) | ((base & ~lower_mask) << 1)

        for row in range(block_size):
            total = 0j
            for col in range(block_size):
                total += matrix[row, col] * state_flat[base | offsets[col]]
            out_flat[base | offsets[row]] = total

    return out


def controlled_matrix(matrix: np.ndarray, control_state: tuple[int, ...]) -> np.ndarray:
    r"""Returns the controlled form of the given matrix

    A controlled matrix is produced by successively taking the direct sum of the matrix :math:`U_n`
    with an equal-rank identity matrix :math:`I_n`, with regular control (indicated by a control
    value of 1) taking the direct sum on the left

        .. math:: C_1(U_n) := I_n \oplus U_n

    and negative control (indicated by a control value of 0) taking the direct sum on the right

        .. math:: C_0(U_n) := U_n \oplus I_n

    The control state is read from left to right, with each control bit doubling the size of the
    matrix. The output matrix will have rank `2**len(ctrl_state)` times that of the input matrix.

    Args:
        matrix (np.ndarray): The matrix to control
        control_state (tuple[int, ...]): Basis state on which to control the operation.
            Each appearance of 1 yields a left direct sum, and 0 yields a right direct sum.

    Returns:
        np.ndarray: The controlled form of the matrix
    """
    new_matrix = matrix
    for state in control_state:
        identity = np.eye(len(new_matrix))
        new_matrix = block_diag(identity, new_matrix) if state else block_diag(new_matrix, identity)
    return new_matrix
