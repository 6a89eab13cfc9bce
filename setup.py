#!/usr/bin/python3
# -*- coding: utf-8 -*-

from setuptools import setup, find_packages
import os

ROOT = os.path.abspath(os.path.dirname(__file__))

with open(os.path.join(ROOT, 'README.md'), 'r', encoding='utf-8') as f:
    long_description = f.read()

setup(
    name='pygibbsflash',
    include_package_data=True,
    version='0.1.0',
    packages=find_packages(include=['pygibbsflash', 'pygibbsflash.*']),
    description='pyGibbsFlash - Multiphase flash by global Gibbs energy minimisation',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='Mark W. Burgoyne',
    author_email='mark.w.burgoyne@gmail.com',
    keywords=['flash', 'phase equilibrium', 'gibbs', 'equation of state', 'differential evolution'],
    classifiers=[],
    python_requires='>=3.9',
    install_requires=[
        'numpy',
        'scipy>=1.15',
        'pandas',
        'tabulate',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
