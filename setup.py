from setuptools import setup, find_packages

setup(
    name="tessvg",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "torch",
        "numpy",
        "shapely>=2.1",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "tessvg-examples = tessvg.cli:main",
        ],
    },
    python_requires=">=3.9",
)
