# setup.py
from setuptools import setup, find_packages

setup(
    name="gune",
    version="0.0.1",
    description="Expression language tokenizer, parser and tree-walking evaluator",
    packages=find_packages(include=["gune", "gune.*", "gune_lsp", "gune_lsp.*"]),
    python_requires=">=3.11",
    install_requires=[
        "pygls>=1.1,<2",
        "lsprotocol",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": [
            "gune=gune.repl:main",
            "gune-ls=gune_lsp.server:main",
            "gune-repl-server=gune_lsp.repl_server:main",
        ],
    },
    zip_safe=False,
)
