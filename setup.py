"""
Setup script for the quiz-round package.

Installs the ``quiz_round`` package from ``src/``. Internal modules live
in the underscore-prefixed subpackages (_core, _game, _shared); the
public API is re-exported from ``quiz_round``.
"""

from setuptools import setup, find_packages

setup(
    name="quiz-round",
    version="1.0.0",
    description="Timed multiplayer quiz round engine: reactive state store and declarative phase machine",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "build",
            "wheel",
        ],
    },
    entry_points={
        "console_scripts": [
            "quiz-round=quiz_round.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Framework :: AsyncIO",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
