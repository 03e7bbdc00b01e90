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

import logging

import numpy as np
import pytest

from qip.pipeline.builder import OpBuilder
from qip.pipeline.common_circuits import cnot, epr_pair
from qip.pipeline.linearizer import linearize
from qip.pipeline.register import Register
from qip.pipeline.runner import dense_state_builder, run, run_with_state
from qip.pipeline.simulation import DenseQuantumState

SQRT_HALF = 1 / np.sqrt(2)


def test_ground_state_without_operations():
    builder = OpBuilder()
    a = builder.qubit()
    b = builder.qubit()
    state = run(builder.merge([a, b]))
    assert state.qubit_count == 2
    assert np.allclose(state.state_vector, [1, 0, 0, 0])


def test_hadamard():
    builder = OpBuilder()
    state = run(builder.hadamard(builder.qubit()))
    assert np.allclose(state.state_vector.real, [SQRT_HALF, SQRT_HALF])
    assert np.allclose(state.state_vector.imag, 0)


def test_not_twice_is_identity():
    builder = OpBuilder()
    r = builder.register(3)
    r = builder.hadamard(r)
    before = run(r).state_vector
    r = builder.not_(builder.not_(r))
    assert np.array_equal(run(r).state_vector, before)


def test_controlled_not():
    builder = OpBuilder()
    control = builder.qubit()
    target = builder.qubit()
    control = builder.not_(control)
    control, target = cnot(builder, control, target)

    state = run(builder.merge([control, target]))

    assert np.allclose(state.probabilities, [0, 0, 0, 1])


@pytest.mark.parametrize("n", [1, 2, 3])
def test_epr_pair(n):
    builder = OpBuilder()
    ra, rb = epr_pair(builder, n)

    state = run(builder.merge([ra, rb]))

    expected = np.zeros(2 ** (2 * n))
    expected[0] = expected[-1] = SQRT_HALF
    assert len(ra) == len(rb) == n
    assert np.allclose(state.state_vector, expected)


def test_epr_pair_halves_match():
    builder = OpBuilder()
    ra, rb = epr_pair(builder, 1)
    state = run(builder.merge([ra, rb]))
    for bitstring in ("00", "11"):
        assert np.isclose(abs(state.amplitude(bitstring)), SQRT_HALF)
    for bitstring in ("01", "10"):
        assert state.amplitude(bitstring) == 0


def test_operations_are_not_reordered():
    builder = OpBuilder()
    r = builder.qubit()
    r = builder.hadamard(r)
    r = builder.z(r)
    r = builder.hadamard(r)
    assert np.allclose(run(r).state_vector, [0, 1])


def test_run_with_state_receives_frontier():
    builder = OpBuilder()
    a = builder.register(2)
    b = builder.qubit()
    a = builder.x(a)
    terminal = builder.merge([a, b])
    received = []

    def state_builder(frontier):
        received.extend(frontier)
        return DenseQuantumState.from_amplitudes([0, 0, 0, 0, 0, 0, 0, 1])

    state = run_with_state(terminal, state_builder)

    assert received == linearize(terminal).frontier
    assert sum(len(r) for r in received) == state.qubit_count
    assert state.amplitude("001") == 1


def test_default_state_builder_size():
    frontier = [Register(1, (2, 3)), Register(0, (0, 1))]
    state = dense_state_builder(frontier)
    assert state.qubit_count == 4


def test_default_state_builder_non_contiguous():
    with pytest.raises(ValueError, match="Non-contiguous"):
        dense_state_builder([Register(0, (0, 2))])


def test_unused_wires_are_rejected():
    builder = OpBuilder()
    builder.qubit()
    r = builder.x(builder.qubit())
    with pytest.raises(ValueError):
        run(r)


def test_parallel_run_matches_sequential(monkeypatch):
    def build():
        builder = OpBuilder()
        ra, rb = epr_pair(builder, 3)
        ra = builder.hadamard(ra)
        rb, ra = builder.swap(rb, ra)
        return builder.merge([ra, rb])

    monkeypatch.setattr("qip.pipeline.linalg_utils._QUBIT_THRESHOLD", 10)
    sequential = run(build())
    monkeypatch.setattr("qip.pipeline.linalg_utils._QUBIT_THRESHOLD", 1)
    parallel = run(build())

    assert not sequential.is_parallel
    assert parallel.is_parallel
    assert np.allclose(sequential.state_vector, parallel.state_vector)


def test_logs_applied_operations(caplog):
    builder = OpBuilder()
    r = builder.hadamard(builder.qubit())
    with caplog.at_level(logging.DEBUG, logger="qip.pipeline.runner"):
        run(r)
    assert "Applying MatrixOp(name='H', targets=(0,))" in caplog.text
