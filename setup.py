#!/usr/bin/env python

from setuptools import setup, find_packages

PACKAGE_NAME = 'courtpick'

setup(
    name=PACKAGE_NAME,
    version='0.1',
    description='Fair picking of players for casual badminton doubles games.',
    packages=find_packages(include=(f'{PACKAGE_NAME}*',)),
    python_requires='>=3.10',
    install_requires=['attrs>=22.1', 'numpy', 'pandas', 'tqdm', 'pydantic', 'pydantic-settings'],
    extras_require={'test': ['pytest', 'scipy']},
)
