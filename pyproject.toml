[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "softcsp"
version = "0.1.0"
description = "A software cryptographic service provider: ECDSA and Ed25519 keys, low-S signing, verification, hashing, key re-randomisation and key import behind a pluggable dispatcher."
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = ["cryptography", "ecdsa", "ed25519", "signing", "csp", "ski"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["softcsp"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
