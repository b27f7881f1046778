[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "barforge"
version = "0.5.1"
description = "Checks, verifies and unpacks Waybar module packages safely"
requires-python = ">=3.11"
keywords = ["waybar", "wayland", "modules", "minisign", "tarball", "security"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment",
    "Topic :: Security",
]
dependencies = [
    "pynacl>=1.5",
    "platformdirs>=4.0",
]

[project.optional-dependencies]
test = [
    "pytest>=8.0",
    "respx>=0.21",
]

[tool.hatch.build.targets.wheel]
packages = ["barforge"]

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
warn_unused_ignores = true
warn_redundant_casts = true
