#!/usr/bin/env python

import os
import re
from setuptools import setup


def load_readme():
    with open('README.rst', 'r') as fd:
        return fd.read()


def load_requirements():
    """Parse requirements.txt"""
    reqs_path = os.path.join('.', 'requirements.txt')
    with open(reqs_path, 'r') as fd:
        requirements = [line.rstrip() for line in fd if line.strip()]
    return requirements


package_name = 'syslog5424'

with open(os.path.join(os.path.dirname(__file__), package_name, '__init__.py')) as f:
    version = re.search("__version__ = '([^']+)'", f.read()).group(1)


setup(name=package_name,
      version=version,
      description='A parser of RFC 5424 syslog messages into typed objects',
      long_description=load_readme(),
      long_description_content_type='text/x-rst',
      classifiers=[
          'Development Status :: 4 - Beta',
          'Environment :: Console',
          'Intended Audience :: Information Technology',
          "Intended Audience :: Developers",
          'License :: OSI Approved :: BSD License',
          "Operating System :: OS Independent",
          "Programming Language :: Python :: 3",
          'Topic :: System :: Logging',
          'Topic :: Software Development :: Libraries :: Python Modules'],
      license='BSD 3-Clause "New" or "Revised" License',

      packages=['syslog5424'],
      install_requires=load_requirements(),
      python_requires='>=3.7',
      test_suite="tests",
      )
