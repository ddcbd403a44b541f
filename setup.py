# -*- coding: utf-8 -*-
import setuptools
import pathlib
import site
import sys

# odd bug with develop (editable) installs, see: https://github.com/pypa/pip/issues/7953
site.ENABLE_USER_SITE = "--user" in sys.argv[1:]

required = [
    "httpx>=0.27",
    "simplejson>= 3.19.2",
    "mashumaro>=3.11",
    "loguru",
    "rich>=13.0.0",
    "click>=8.0.0",
    "click-option-group",
]

extras = {
    "test": [
        "pytest",
        "pytest_asyncio>=0.24.0",
    ],
}

here = pathlib.Path(__file__).parent.resolve()

long_description = (here / "README.md").read_text(encoding="utf-8")

# Read version
version = {}
with open(here / "src/protorunner/_version.py", "r") as f:
    exec(f.read(), version)

if __name__ == "__main__":
    setuptools.setup(
        name="protorunner",
        version=version["__version__"],
        description="Browse, configure and run device-control protocols.",
        long_description=long_description,
        long_description_content_type="text/markdown",
        keywords=[
            "laboratory automation",
            "liquid handling",
            "protocols",
            "JSON schema",
        ],
        classifiers=[
            "License :: OSI Approved :: MIT License",
            "Development Status :: 2 - Pre-Alpha",
        ],
        license="MIT",
        package_dir={"": "src"},
        packages=setuptools.find_packages(
            where="src",
            exclude=["*.test", "*.test.*", "test.*", "test", "test_*"],
        ),
        entry_points={
            "console_scripts": [
                "protorunner=protorunner.cli:cli",
            ],
        },
        install_requires=required,
        extras_require=extras,
        python_requires=">= 3.11",
        package_data={"": ["*.md"]},
        setup_requires=["wheel"],  # force install of wheel first
    )
# https://setuptools.readthedocs.io/en/latest/userguide/datafiles.html
