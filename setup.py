"""Setup for yamlmodel.
"""

import os

from setuptools import setup

dirname = os.path.dirname(__file__)
info = {}
with open(os.path.join(dirname, "yamlmodel", "__info__.py"), mode="r") as f:
    exec(f.read(), info)  # pylint: disable=W0122

# Get the long description from the README file.
with open(os.path.join(dirname, "README.md"), encoding="utf-8") as fle:
    long_description = fle.read()

setup(
    name="yamlmodel",
    version=info.get("__version__", ""),
    description="Map YAML documents onto untyped values, models and enums.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author=info.get("__author__", ""),
    author_email=info.get("__email__", ""),
    license=info.get("__license__", ""),
    packages=["yamlmodel", "yamlmodel.serializers", "yamlmodel.utils"],
    install_requires=["PyYAML>=5.4", "python-dateutil~=2.8", "decorator>=5.1"],
    extras_require={
        "ci": [
            "flake8-print~=3.1",
            "flake8~=3.8",
            "pep8-naming~=0.11",
            "pytest-cov",
            "pytest",
            "sphinx-markdown-tables~=0.0",
            "sphinx-rtd-theme",
            "sphinxcontrib-apidoc~=0.3",
            "Sphinx",
        ],
    },
    include_package_data=True,
)
