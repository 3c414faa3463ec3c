"""Version information for DiffCore dependencies.

This contains constants that other parts of DiffCore (primarily packaging)
can use to look up information on major dependencies of DiffCore.

The contents in this file might change substantially between releases. If
you're going to make use of data from this file, check what's there first.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from typing_extensions import TypeAlias


#: A version specifier for a dependency.
#:
#: This is either a single specifier, or a list of dictionaries with
#: ``python`` and ``version`` keys for specifiers that depend on the version
#: of Python.
Dependency: TypeAlias = Union[str, list[dict[str, str]]]


###########################################################################
# Python and Django compatibility
###########################################################################

#: The minimum supported version of Python.
PYTHON_MIN_VERSION = (3, 9)

#: A string representation of the minimum supported version of Python.
PYTHON_MIN_VERSION_STR = '%s.%s' % (PYTHON_MIN_VERSION)


# NOTE: This file may not import other (non-Python) modules! (Except for
#       the parent diffcore module, which must be importable anyway). This
#       module is used for packaging and be needed before any dependencies
#       have been installed.


#: The version of Django required for the current version of Python.
django_version = '~=4.2.23'


###########################################################################
# Python dependencies
###########################################################################

#: All dependencies required to install DiffCore.
package_dependencies: Mapping[str, Dependency] = {
    'Django': django_version,
    'typing_extensions': '>=4.3.0',
}

#: Dependencies required to run the test suite.
test_dependencies: Mapping[str, Dependency] = {
    'kgb': '>=7.1.1',
    'pytest': '>=7.4',
}


###########################################################################
# Packaging utilities
###########################################################################

def build_dependency_list(
    deps: Mapping[str, Dependency],
    version_prefix: str = '',
) -> Sequence[str]:
    """Build a list of dependency specifiers from a dependency map.

    This can be used along with :py:data:`package_dependencies` or
    :py:data:`test_dependencies` to build a list of dependency specifiers
    for use on the command line or in :file:`setup.py`.

    Args:
        deps (dict):
            A dictionary of dependencies.

        version_prefix (str, optional):
            A prefix to include before any package versions.

    Returns:
        list of str:
        A list of dependency specifiers.
    """
    new_deps: list[str] = []

    for dep_name, dep_details in deps.items():
        if isinstance(dep_details, list):
            new_deps += [
                f'{dep_name}{version_prefix}{entry["version"]}; '
                f'python_version{entry["python"]}'
                for entry in dep_details
            ]
        else:
            new_deps.append(f'{dep_name}{version_prefix}{dep_details}')

    return sorted(new_deps, key=lambda s: s.lower())
