[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "roiobstacle"
version = "0.1.0"
description = "Frame-to-frame obstacle detection from feature growth inside a fixed centre region of interest"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "obstacle detection",
    "computer vision",
    "keypoints",
    "feature matching",
    "optical flow",
    "collision avoidance",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Recognition",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["roiobstacle"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
