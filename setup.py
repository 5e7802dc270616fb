# setup.py
from setuptools import setup, find_packages

setup(
    name="oreore",
    version="0.1.0",
    description="Language server for the oreore toy Lisp",
    packages=find_packages(include=["oreore", "oreore.*", "oreore_lsp", "oreore_lsp.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pygls>=1.1,<2",
        "lsprotocol",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": [
            "oreore=oreore.__main__:main",
        ],
    },
    zip_safe=False,
)
