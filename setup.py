# setup.py
from setuptools import setup, find_packages

setup(
    name="qlisp",
    version="0.0.5",
    description="Tree-walking evaluator for a small Lisp with S- and Q-expressions",
    packages=find_packages(include=["qlisp", "qlisp.*", "qlisp_lsp", "qlisp_lsp.*"]),
    python_requires=">=3.11",
    install_requires=[],
    extras_require={
        "lsp": ["pygls>=1.1,<2", "lsprotocol>=2023.0.0"],
        "test": ["pytest>=7", "hypothesis>=6", "pygls>=1.1,<2", "lsprotocol>=2023.0.0"],
    },
    entry_points={
        "console_scripts": [
            "qlisp=qlisp.repl:main",
            "qlisp-repl-server=qlisp_lsp.repl_server:main",
            "qlisp-ls=qlisp_lsp.server:main",
        ],
    },
    zip_safe=False,
)
