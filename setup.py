from setuptools import setup, find_packages


setup(
    name="tarblocks",
    version="0.1",
    packages=find_packages(include=["tarblocks", "tarblocks.*"]),
    description="A streaming, block-level reader for POSIX ustar archives.",
    author="vercingetorx",
    install_requires=[],
    entry_points={
        "console_scripts": [
            "tarblocks=tarblocks.cli:main",
        ]
    },
)
