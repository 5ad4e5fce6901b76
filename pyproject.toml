[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "armctl"
version = "0.9.2"
description = "Command types, robot state and rate limiting for torque-controlled 7-joint robot arms"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["robotics", "robot arm", "motion control", "rate limiting", "kinematics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Human Machine Interfaces",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["armctl"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
