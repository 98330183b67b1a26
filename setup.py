# encoding: utf-8

import os
import re
from setuptools import setup, find_packages

HERE = os.path.dirname(__file__)

with open(os.path.join(HERE, "config_scripts", "__init__.py")) as f:
    version = re.search(r"__version__ = u?['\"]([^'\"]+)['\"]",
                        f.read()).group(1)


def _requirements(filepath):
    with open(os.path.join(HERE, filepath), "r") as f:
        return [
            line.strip() for line in f
            if line.strip() and not line.startswith("#")
        ]


extras_require = {}
_extras_groups = [
    ("dev", "dev-requirements.txt"),
]

for group, filepath in _extras_groups:
    extras_require[group] = _requirements(filepath)

setup(
    name="config-scripts",
    version=version,
    description=(
        "One-off configuration scripts and reference-preserving seed data "
        "for SQLAlchemy applications"
    ),
    license="MIT",
    python_requires=">=3.9",
    packages=find_packages(include=["config_scripts", "config_scripts.*"]),
    package_data={
        "config_scripts.migration": [
            "alembic.ini",
            "script.py.mako",
            "versions/*.py",
        ],
    },
    include_package_data=True,
    install_requires=_requirements("requirements.txt"),
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "config-scripts = config_scripts.cli.cli:config_scripts_cli",
        ],
    },
)
