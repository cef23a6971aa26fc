[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vigilant_canine"
version = "0.1.0"
description = "Host intrusion detection building blocks: file hashing, distribution detection and TOML configuration with home-directory policy merging"
requires-python = ">=3.11"
dependencies = []
keywords = [
    "security",
    "intrusion-detection",
    "file-integrity",
    "hids",
    "configuration",
    "blake3",
    "sha256",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["vigilant_canine"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.11"
