[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "roastkit"
version = "0.1.0"
description = "Sensor and actuator logic for coffee roaster controllers: type K thermocouples, MCP3424 ADC, MCP9800 and DS18B20 sensors, triac phase control and serial command parsing"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "coffee",
    "roaster",
    "thermocouple",
    "type-k",
    "its-90",
    "mcp3424",
    "mcp9800",
    "ds18b20",
    "triac",
]
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
    "Topic :: Home Automation",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["roastkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
