#!/usr/bin/env python3
from setuptools import setup, find_packages

setup(
    name="colwm",
    version="0.1.0",
    description="A column tiling window manager for X11",
    license="ISC",
    packages=find_packages(include=["colwm", "colwm.*"]),
    python_requires=">=3.9",
    install_requires=[
        "python-xlib",
        "pypubsub",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "colwm = colwm.tilewm:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: ISC License (ISCL)",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Desktop Environment :: Window Managers",
    ],
)
