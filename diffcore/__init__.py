"""DiffCore version and package information.

These variables and functions can be used to identify the version of
DiffCore. They're largely used for packaging purposes.
"""

from __future__ import annotations

from typing import Any


#: The version of DiffCore.
#:
#: This is in the format of:
#:
#: (Major, Minor, Micro, Patch, alpha/beta/rc/final, Release Number, Released)
#:
VERSION: tuple[int, int, int, int, str, int, bool] = \
    (1, 0, 0, 0, 'beta', 1, False)


def get_version_string() -> str:
    """Return the DiffCore version as a human-readable string.

    Returns:
        str:
        The DiffCore version string.
    """
    major, minor, micro, patch, tag, release_num, released = VERSION
    version = f'{major}.{minor}'

    if micro or patch:
        version += f'.{micro}'

    if patch:
        version += f'.{patch}'

    if tag != 'final':
        if tag == 'rc':
            version += f' RC{release_num}'
        else:
            version += f' {tag} {release_num}'

    if not released:
        version += ' (dev)'

    return version


def get_package_version() -> str:
    """Return the DiffCore version as a Python package version string.

    Returns:
        str:
        The DiffCore package version.
    """
    major, minor, micro, patch, tag, release_num = VERSION[:-1]
    version = f'{major}.{minor}'

    if micro or patch:
        version += f'.{micro}'

    if patch:
        version += f'.{patch}'

    if tag != 'final':
        if tag == 'alpha':
            tag = 'a'
        elif tag == 'beta':
            tag = 'b'

        version += f'{tag}{release_num}'

    return version


def is_release() -> bool:
    """Return whether this is a released version of DiffCore.

    Returns:
        bool:
        True if the current version of DiffCore is a release.
    """
    return VERSION[-1]


def initialize(
    **settings_kwargs: Any,
) -> None:
    """Begin initialization of DiffCore.

    This sets up Django's settings for standalone use of DiffCore, if the
    caller hasn't already configured them. Error messages are translated
    through Django, and :py:class:`diffcore.settings.DiffOptions` reads its
    defaults from the settings, so this must be called before either are
    used outside of a configured Django project.

    Calling this more than once is safe. Projects that configure their own
    Django settings do not need to call this, though they may still do so
    to finish setting up Django.

    Args:
        **settings_kwargs (dict):
            Additional settings to configure. These override the DiffCore
            defaults. They're ignored if settings were already configured.
    """
    import django
    from django.apps import apps
    from django.conf import settings

    if not settings.configured:
        settings.configure(**dict({
            'DIFFCORE_EXTEND_TO_SUBWORDS': False,
            'DIFFCORE_IGNORE_TRIM_WHITESPACE': True,
            'DIFFCORE_MAX_COMPUTATION_TIME_MS': 5000,
            'INSTALLED_APPS': [],
            'USE_I18N': True,
        }, **settings_kwargs))

    if not apps.ready:
        django.setup()


#: An alias for the the version information from :py:data:`VERSION`.
#:
#: This does not include the last entry in the tuple (the released state).
__version_info__ = VERSION[:-1]

#: An alias for the version used for the Python package.
__version__ = get_package_version()
