[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fivegsim"
version = "0.1.0"
description = "Building blocks for a 5G network simulator: GTP-U codec and tunnel, AMF and gNB configuration, NAS transport, PLMN coding and the gNB relay session table"
requires-python = ">=3.10"
keywords = ["5g", "gtp-u", "amf", "gnb", "nas", "plmn", "telecom", "simulator"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Telephony",
    "Topic :: System :: Networking",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["fivegsim"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
