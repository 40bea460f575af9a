"""
Setup script for the SwapWatch package

Declares runtime dependencies and the test extra.
"""

from setuptools import setup, find_packages

setup(
    name="swapwatch",
    version="0.1",
    description="Async detector for addresses laundering tokens into native currency through repeated swaps",
    author="SwapWatch Contributors",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    install_requires=[
        "web3>=7.0.0",
        "pydantic>=2.0.0",
        "loguru>=0.7.0",
        "tomli>=2.0.0",
        "wxpusher>=2.0.0",
        "hexbytes>=0.3.0",
        "aioetherscan>=0.9.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "tomli-w>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "swapwatch=main:main",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Security",
    ],
)
