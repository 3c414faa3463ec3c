#!/usr/bin/env python3
#
# Setup script for DiffCore.

import os
import subprocess
import sys

from setuptools import Command, setup, find_packages

from diffcore import get_package_version
from diffcore.dependencies import (PYTHON_MIN_VERSION,
                                   PYTHON_MIN_VERSION_STR,
                                   build_dependency_list,
                                   package_dependencies,
                                   test_dependencies)


# Make sure this is a version of Python we are compatible with. This should
# prevent people on older versions from unintentionally trying to install
# the source tarball, and failing.
pyver = sys.version_info[:2]

if pyver < PYTHON_MIN_VERSION:
    sys.stderr.write(
        'DiffCore %s is incompatible with your version of Python '
        '(%s.%s).\n'
        'Please install an older release of DiffCore or upgrade to '
        'Python %s or newer.\n'
        % (get_package_version(), pyver[0], pyver[1], PYTHON_MIN_VERSION_STR))
    sys.exit(1)


# NOTE: When updating, make sure you update the classifiers below.
SUPPORTED_PYVERS = ['3.9', '3.10', '3.11', '3.12']


if '--all-pyvers' in sys.argv:
    new_argv = sys.argv[1:]
    new_argv.remove('--all-pyvers')

    for pyver in SUPPORTED_PYVERS:
        result = os.system(subprocess.list2cmdline(
            ['python%s' % pyver, __file__] + new_argv))

        if result != 0:
            sys.exit(result)

    sys.exit(0)


# Make sure we're actually in the directory containing setup.py.
root_dir = os.path.dirname(__file__)

if root_dir != '':
    os.chdir(root_dir)


class RunTestsCommand(Command):
    """Runs the DiffCore test suite using pytest."""

    description = 'Run the test suite'

    user_options = [
        (str('pytest-args='), None, 'Extra arguments to pass to pytest'),
    ]

    def initialize_options(self):
        """Initialize options for the command."""
        self.pytest_args = ''

    def finalize_options(self):
        """Finalize options for the command.

        This is required, but does not actually do anything.
        """
        pass

    def run(self):
        """Run the test suite.

        Raises:
            RuntimeError:
                One or more tests failed.
        """
        retcode = subprocess.call(
            [sys.executable, '-m', 'pytest'] + self.pytest_args.split())

        if retcode != 0:
            raise RuntimeError('Tests failed')


PACKAGE_NAME = 'DiffCore'


with open('README.rst', 'r') as fp:
    long_description = fp.read()


setup(
    name=PACKAGE_NAME,
    version=get_package_version(),
    license='MIT',
    description=(
        'Readable line and character diffs, computed the way modern '
        'editors compute them'
    ),
    long_description=long_description,
    long_description_content_type='text/x-rst',
    packages=find_packages(exclude=['tests']),
    install_requires=build_dependency_list(package_dependencies),
    extras_require={
        'test': build_dependency_list(test_dependencies),
    },
    include_package_data=True,
    zip_safe=False,
    cmdclass={
        'test': RunTestsCommand,
    },
    python_requires='>=%s' % PYTHON_MIN_VERSION_STR,
    classifiers=[
        'Development Status :: 4 - Beta',
        'Framework :: Django',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Software Development',
        'Topic :: Text Processing',
    ],
)
