[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "canlink"
version = "0.1.0"
description = "Raw CAN and ISO-TP send/receive loops over Linux SocketCAN"
requires-python = ">=3.10"
dependencies = []
keywords = ["can", "socketcan", "isotp", "iso-tp", "automotive"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems :: Controller Area Network (CAN)",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
canlink-raw = "canlink.raw:main"
canlink-isotp = "canlink.isotp:main"

[tool.hatch.build.targets.wheel]
packages = ["canlink"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
