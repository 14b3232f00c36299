#! /usr/bin/env python
#
# Copyright (c) 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
from setuptools import setup, find_packages
from pathlib import Path


with Path(__file__).parent.joinpath('README.rst').open() as readme:
    long_description = readme.read()


setup(
    name='xsdgen',
    version='0.3.0',
    packages=find_packages(include=['xsdgen*']),
    package_data={
        'xsdgen': ['schemas/*.xsd'],
        'xsdgen.codegen': ['templates/*/*.jinja'],
    },
    entry_points={
        'console_scripts': [
            'xsdgen-compile=xsdgen.cli:compile_schema',
        ]
    },
    python_requires='>=3.9',
    install_requires=['elementpath>=4.4.0, <5.0.0', 'jinja2'],
    extras_require={
        'dev': ['tox', 'coverage', 'elementpath>=4.4.0, <5.0.0', 'jinja2',
                'flake8', 'mypy'],
    },
    author='Davide Brunato',
    author_email='brunato@sissa.it',
    license='MIT',
    description='A compiler of XSD schemas into validating Python parsers',
    long_description=long_description,
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Intended Audience :: Information Technology',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Programming Language :: Python :: 3.13',
        'Programming Language :: Python :: Implementation :: CPython',
        'Topic :: Software Development :: Code Generators',
        'Topic :: Text Processing :: Markup :: XML',
    ]
)
