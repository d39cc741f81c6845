[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ppledger"
version = "1.0.0"
description = "Building blocks for a proof-of-stake ledger: logging, TCP transport and Ouroboros-style slot leader consensus"
requires-python = ">=3.10"
dependencies = []
keywords = ["ledger", "blockchain", "proof-of-stake", "ouroboros", "consensus", "vrf", "epoch"]
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
    "Topic :: System :: Distributed Computing",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
pp-ledger-client = "ppledger.client:main"

[tool.hatch.build.targets.wheel]
packages = ["ppledger"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
