[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "solsysvars"
version = "0.9.1"
description = "Parse and query Solana sysvar account data: clock, fees, rent, instructions and slot hashes"
requires-python = ">=3.10"
dependencies = []
keywords = ["solana", "sysvar", "rent", "slot-hashes", "pda", "blockchain"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["solsysvars"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
