[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dgidgw"
version = "20230212"
description = "Building blocks of a DG-ID gateway for System Fusion (YSF) repeaters: configuration, FCS reflector link, GPS decoding and APRS reporting"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "ham radio",
    "amateur radio",
    "system fusion",
    "ysf",
    "fcs",
    "dg-id",
    "aprs",
    "mmdvm",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Ham Radio",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dgidgw"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
