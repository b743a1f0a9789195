# su2synth

Approximates single-qubit unitaries in SU(2) by Clifford+T gate words over
the alphabet `H`, `S`, `T`, all in arbitrary-precision arithmetic on mpmath.

## Contents

- `su2synth.numeric`: working precision (`set_precision`, `get_precision`,
  `epsilon`, `digits10`), constants (`pi`, `sqrt2`, `inv_sqrt2`, `zeta8`,
  `zeta16`), exact rounding to integers (`round_to_int`, `ceil_to_int`,
  `floor_to_int`), `pow_ui`, and the `Status` enum.
- Exact rings: `su2synth.zroot2.Zroot2` (Z[√2]), `su2synth.zzeta8.Zzeta8`
  (Z[ζ₈]) and `su2synth.zzeta8j.Zzeta8j` (Z[ζ₈, j]), immutable and ordered,
  with `+`, `-`, `*`, exact `/` (raising `ArithmeticError` when the divisor
  does not divide), norms, conjugates and `divisible`. `left_div` and
  `right_div` divide quaternions exactly.
- `su2synth.su2`: the `SU2` unit quaternion with `adjoint`, `determinant`,
  `trace`, `to_matrix`, `is_unitary`, `unitalize` and `*`; `distance`;
  `random_unitary` (Haar-random, optionally seeded) and
  `set_random_unitary_seed`.
- `su2synth.linalg`: `gso`, `cholesky`, `solve_system_spd`, `inverse_spd`.
- `su2synth.number_theory`: `pow_mod` and the Miller–Rabin test `is_prime`.
- `su2synth.lattice`: LLL reduction `lll` and `enum_integer_points`, which
  lists every integer point x with (x − p)ᵀ Q (x − p) ≤ c.
- `su2synth.exact_synth`: `U2Dzeta8` and `SO3Droot2`, exact synthesis
  `synth` and `get_t_count`.
- `su2synth.deterministic_synth`: approximate synthesis `synth`, plus
  `fixed_t_synth` and `solve_approx_lattice`.
- `su2synth.sdp`: a primal–dual interior-point solver `solve` for
  block-diagonal semidefinite programs (`BlockDiagonal`, `Options`,
  `Results`, `hs_inner`).
- `su2synth.mix_su2`: `MixSU2.compute_optimal_prob`, which finds mixing
  probabilities over a set of available unitaries for a target, solved at
  256 bits; `choi_jamiolkowski` and `choi_jamiolkowski_magic_basis`.
- `su2synth.profiler`: `Timer` and `Profiler`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Approximate synthesis

```python
from su2synth.su2 import random_unitary
from su2synth.deterministic_synth import synth

target = random_unitary(1234)
sequence = synth(target, 1e-5)
print(sequence, sequence.count("T"))
```

`synth` searches T-counts 0, 1, 2, … and returns the word for the first
T-count that has a solution within distance `eps` of the target. An `eps`
of 1 or more gives the empty word; a non-positive `eps` raises
`ValueError`. The working precision is raised for the search from the size
of `eps`.

## Exact synthesis

```python
from su2synth.zzeta8 import Zzeta8
from su2synth.exact_synth import U2Dzeta8, synth, get_t_count

u = U2Dzeta8.from_column(Zzeta8(1), Zzeta8(0), 1, 0)
print(synth(u))          # "T"
print(get_t_count(u))    # 1

v = U2Dzeta8.from_sequence("HTSHT")
print(synth(v))
```

`U2Dzeta8.from_sequence` multiplies the gates left to right and raises
`ValueError` for any character other than `H`, `S` or `T`.

## Benchmark

```
su2synth-benchmark
```

draws a seeded set of random target unitaries, synthesises each one with
`deterministic_synth.synth` and prints the T-count of each, then the eps
values with the average, minimum and maximum T-counts and the average time
per target in milliseconds. Options: `--count` (default 100), `--seed`
(default 1234), and `--start` / `--stop` (both default 1e-12), between which
eps falls by a factor of √0.1 at each step.

## Timing report

Lattice enumeration, LLL, the SDP solver and `solve_approx_lattice` time
themselves through `Profiler.instance()`, which writes a timing summary to
standard error when the process exits. Call
`Profiler.instance().set_auto_report(False)` to silence it.

## What it does not do

The package has no probabilistic synthesis that turns a target into a
mixture of gate words: `MixSU2` only computes probabilities for unitaries
it is given. There is no command for synthesising a single unitary; the
only command is the benchmark, and synthesis otherwise goes through the
library functions above.