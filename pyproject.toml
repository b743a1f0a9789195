[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "su2synth"
version = "0.1.0"
description = "Clifford+T synthesis of single-qubit SU(2) unitaries with exact rings, lattice enumeration and an SDP solver"
requires-python = ">=3.10"
dependencies = [
    "mpmath",
]
keywords = [
    "quantum computing",
    "clifford+t",
    "gate synthesis",
    "su2",
    "lattice",
    "lll",
    "semidefinite programming",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Quantum Computing",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
su2synth-benchmark = "su2synth.benchmark:main"

[tool.hatch.build.targets.wheel]
packages = ["su2synth"]

[tool.pytest.ini_options]
addopts = "-ra"
