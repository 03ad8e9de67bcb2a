"""Sets up the sigbridge package, test dependencies and command line scripts"""

from setuptools import find_packages, setup

# .. Dependency lists .........................................................

INSTALL_DEPS = [
    "coloredlogs",
    "click",
    "pydantic >= 2.0",
    #
    # used for extended log levels, YAML reading/writing and dict updates
    "dantro>=0.21.0",
]

# Dependencies for running tests and general development of sigbridge
TEST_DEPS = [
    "pytest",
    "pytest-cov",
]


# .. Description ..............................................................

DESCRIPTION = "Turns operating system signals into log records"
LONG_DESCRIPTION = """
``sigbridge``: Turns operating system signals into log records
==============================================================

The ``sigbridge`` package bridges asynchronous process signals (interrupt,
terminate, user-defined signals, ...) to structured log records:

- **Register signals** at a chosen severity; upon delivery, a record like
  ``Program received signal SIGUSR1`` is emitted, carrying the signal metadata
  as context.
- **Keep previous handling**: the disposition in place before registration is
  captured and, optionally, carried out after logging; it is restored when the
  bridge is closed.
- **Control dispatch**: react asynchronously or only at explicit poll points,
  and choose whether interrupted system calls are restarted.
- **Configure** registrations via YAML files and inspect signals via the
  ``sigbridge`` CLI.
"""


# .............................................................................


def find_version(*file_paths) -> str:
    """Tries to extract a version from the given path sequence"""
    import codecs
    import os
    import re

    def read(*parts):
        """Reads a file from the given path sequence, relative to this file"""
        here = os.path.abspath(os.path.dirname(__file__))
        with codecs.open(os.path.join(here, *parts), "r") as fp:
            return fp.read()

    # Read the file and match the __version__ string
    file = read(*file_paths)
    match = re.search(r"^__version__\s?=\s?['\"]([^'\"]*)['\"]", file, re.M)
    if match:
        return match.group(1)
    raise RuntimeError("Unable to find version string in " + str(file_paths))


# .............................................................................


setup(
    name="sigbridge",
    #
    # Package information
    version=find_version("sigbridge", "__init__.py"),
    #
    description=DESCRIPTION,
    long_description=LONG_DESCRIPTION,
    author="sigbridge developers",
    classifiers=[
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        #
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Operating System :: POSIX",
        #
        "Topic :: System :: Logging",
        "Topic :: Utilities",
    ],
    #
    # Package content
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data=dict(sigbridge=["cfg/*.yml"]),
    #
    # Dependencies
    install_requires=INSTALL_DEPS,
    extras_require=dict(
        test=TEST_DEPS,
        dev=TEST_DEPS,
    ),
    #
    # Command line scripts
    entry_points={
        "console_scripts": [
            "sigbridge = sigbridge_cli.cli:cli",
        ],
    },
)
