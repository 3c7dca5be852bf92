"""Package configuration for alidrive."""

import re

from setuptools import setup, find_packages

# Read version from alidrive/__init__.py to avoid duplication
with open("alidrive/__init__.py") as f:
    version = re.search(r'__version__\s*=\s*"(.+?)"', f.read()).group(1)

setup(
    name="alidrive",
    version=version,
    description="Aliyun Drive client: refresh-token auth, chunked upload, streamed download",
    author="alidrive contributors",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "requests",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "alidrive=alidrive.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Operating System :: MacOS",
    ],
)
