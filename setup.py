#!/usr/bin/env python

import setuptools


with open("requirements.txt", "r") as req_file:
    requirements = [
        line.strip()
        for line in req_file
        if line.strip() and not line.startswith("#")
    ]


setuptools.setup(
    name="radio-player",
    version="1.0",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    url="https://r-a-d.io",
    license="BSD 3-Clause License",
    description="Desktop player for the r/a/d.io stream",
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={"test": ["pytest"]},
    scripts=[
        "bin/playerd",
        "bin/playerctl",
    ],
)
