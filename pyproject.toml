[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "apogeo"
version = "0.1.0"
description = "Dashboard for rocket motor static tests: live serial capture of thrust and temperatures, CSV analysis and impulse summaries"
requires-python = ">=3.10"
keywords = ["rocketry", "thrust", "static-fire", "serial", "dashboard", "impulse", "csv"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: X11 Applications",
    "Intended Audience :: Science/Research",
    "Natural Language :: Spanish",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Visualization",
]
dependencies = [
    "pyserial",
    "matplotlib",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
apogeo = "apogeo.gui:main"
apogeo-serial = "apogeo.serial_link:main"

[tool.hatch.build.targets.wheel]
packages = ["apogeo"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
