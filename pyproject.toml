[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "liminal"
version = "0.1.0"
description = "A terminal emulator core with widget-based UI and local AI assistance through Ollama"
requires-python = ">=3.11"
keywords = ["terminal", "emulator", "ansi", "ollama", "ai", "shell"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Terminals :: Terminal Emulators/X Terminals",
    "Typing :: Typed",
]
dependencies = [
    "httpx>=0.25",
    "platformdirs>=3.0",
    "tomli-w>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "pytest-asyncio>=0.21",
    "respx>=0.20",
]

[project.scripts]
liminal = "liminal.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["liminal"]

[tool.pytest.ini_options]
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
