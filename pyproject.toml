[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "roverctl"
version = "0.1.0"
description = "Control logic for a small rover: PID drive loops, navigation, gamepad decoding, Wi-Fi command parsing and telemetry logging"
requires-python = ">=3.10"
dependencies = []
keywords = ["rover", "pid", "navigation", "gamepad", "telemetry", "ring-buffer", "crc32"]
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
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["roverctl"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
