# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0

from setuptools import setup, find_packages

with open(f"README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open(f"requirements.txt", encoding="utf-8") as fh:
    install_requires = [line.strip() for line in fh.read().split('\n') if line.strip()]

setup(
    name="tonbath",
    version="0.0.1a0",
    author="Disintar LLP",
    author_email="andrey@head-labs.com",
    description="Summarize TON transaction traces into high level actions",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/disintar/tonbath",
    project_urls={
        "Bug Tracker": "https://github.com/disintar/tonbath/issues",
    },
    classifiers=[
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
        'Intended Audience :: Developers',
        'Programming Language :: Python :: 3',
    ],
    install_requires=install_requires,
    extras_require={
        'test': ['pytest'],
    },
    python_requires=">=3.8",
    packages=find_packages(
        where='src',  # '.' by default
    ),
    package_dir={
        "": "src",
    },
    entry_points={
        'console_scripts': [
            'tonbath = tonbath.main:main',
        ],
    },
    include_package_data=True
)
