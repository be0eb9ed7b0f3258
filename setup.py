# setup.py
from setuptools import setup, find_packages

setup(
    name="cellisp",
    version="0.1.0",
    description="A small Scheme-like interpreter over a collected cons-cell heap",
    packages=find_packages(include=["cellisp", "cellisp.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": ["cellisp=cellisp.repl:main"],
    },
    zip_safe=False,
)
