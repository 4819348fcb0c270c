from setuptools import setup, find_namespace_packages

setup(
    name="pathentry-tools",
    version="1.0.0",
    description="Path and file metadata helpers: derived names, free paths, slugified renames",
    author="Ashwin Nair",
    packages=find_namespace_packages(include=["common", "common.*", "pathentry", "pathentry.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyYAML>=6.0",
        "rich>=13.0",
        "python-slugify>=8.0",
        "chardet>=5.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "pathentry = pathentry.cli:main"
        ],
    },
)
