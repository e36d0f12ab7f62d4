#!/usr/bin/env python3
# Note that this script only installs the python modules
from setuptools import setup
import contextlib
import re

VERSION = '0.0.1'

with contextlib.suppress(Exception):
    with open('version', 'r', encoding='ascii') as f:
        match = re.match('^\\d+\\.\\d+\\.\\d+', f.read().strip())
        if match:
            VERSION = match.group(0)

setup(name='pcmkservice',
      version=VERSION,
      description='Reconcile service state with Pacemaker cluster primitives',
      packages=['pcmkservice'],
      install_requires=['PyYAML'],
      extras_require={'test': ['pytest']},
      include_package_data=True)
