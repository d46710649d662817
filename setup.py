from setuptools import find_packages, setup

from sharedjournal.version import SHAREDJOURNAL_VERSION

long_description = ""
with open("README.md") as ifp:
    long_description = ifp.read()

setup(
    name="sharedjournal",
    version=SHAREDJOURNAL_VERSION,
    author="How's You",
    description="Shared journals: backend for journals shared by key",
    long_description=long_description,
    long_description_content_type="text/markdown",
    platforms="all",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Natural Language :: English",
        "Programming Language :: Python",
        "License :: OSI Approved :: Apache Software License",
        "Topic :: Software Development :: Libraries",
    ],
    python_requires=">=3.8",
    packages=find_packages(exclude=["tests", "tests.*"]),
    zip_safe=False,
    install_requires=[
        "fastapi>=0.100.0",
        "httptools",
        "psycopg2-binary>=2.9.1",
        "pydantic>=2.0",
        "sqlalchemy>=2.0",
        "uvicorn>=0.15.0",
    ],
    extras_require={
        "dev": ["alembic", "black", "isort", "mypy"],
        "test": ["pytest", "httpx"],
        "distribute": ["setuptools", "twine", "wheel"],
    },
    entry_points={
        "console_scripts": [
            "sharedjournal-admin=sharedjournal.journal.cli:main",
        ]
    },
)
