from setuptools import setup, find_packages

setup(
    name="actionlog",
    version="0.1.0",
    description="ActionLog — undo/redo action history with debounced local persistence",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "PyQt5>=5.15",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "actionlog=actionlog.main:main",
        ],
    },
)
