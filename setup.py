# setup.py
from setuptools import setup, find_packages

setup(
    name="canvas_graph",
    version="0.1.0",
    description="Collapsible, interactive graph widget with layered layout",
    author="Swift Fox",
    packages=find_packages(
        exclude=(
            "tests",
            "tests.*",
            "docs",
            "build",
            "dist",
        )
    ),
    install_requires=[
        "networkx",
        "numpy",
        "matplotlib",
        "grandalf",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.10",
)
