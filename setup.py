from setuptools import setup, find_packages

setup(
    name="harvestfilter",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[],
    extras_require={
        "test": [
            "pytest>=7.2.1",
        ],
    },
    entry_points={
        "console_scripts": [
            "harvestfilter=harvestfilter.cli:main",
        ],
    },
    python_requires=">=3.8",
    author="Your Name",
    description="Gitignore-style include/exclude filtering for file harvesting",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
