[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bookrental"
version = "1.0.0"
description = "Request models, configuration, role checks and controllers for a small book rental API"
requires-python = ">=3.10"
keywords = ["books", "rental", "rest", "api", "authorization", "controllers"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Typing :: Typed",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
]
dependencies = [
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["bookrental"]

[tool.pytest.ini_options]
addopts = "-ra"
