[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "suiup"
version = "0.0.8"
description = "Library for downloading, installing and switching between releases of Sui tooling binaries (sui, mvr, walrus, site-builder)."
requires-python = ">=3.10"
dependencies = [
    "requests",
    "tqdm",
]
keywords = ["sui", "walrus", "mvr", "version-manager", "toolchain", "installer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: MacOS",
    "Operating System :: Microsoft :: Windows",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Software Distribution",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["suiup"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
