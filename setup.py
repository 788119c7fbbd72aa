#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""The setup script."""

from setuptools import setup, find_packages

with open('README.rst') as readme_file:
    readme = readme_file.read()

with open('requirements.txt') as r:
    requirements = [line.strip() for line in r if line.strip()]

test_requirements = ['pytest', ]

setup(
    name='kubinit',
    version='0.1.0',
    description=('Render cloud-init user data for MicroK8s control plane '
                 'machines'),
    long_description=readme,
    long_description_content_type='text/x-rst',
    license='Apache-2.0',
    packages=find_packages(include=['kubinit', 'kubinit.*']),
    python_requires='>=3.8',
    install_requires=requirements,
    extras_require={'test': test_requirements},
    entry_points={
        'console_scripts': ['kubinit=kubinit.kubinit:main'],
    },
    classifiers=[
        'Environment :: Console',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: Apache Software License',
        'Programming Language :: Python :: 3',
        'Topic :: System :: Systems Administration',
    ],
)
