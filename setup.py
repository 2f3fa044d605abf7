import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="urifactory",
    version="1.1.0",
    description="Create URI objects and resolve URI references against a base URI (RFC 3986).",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=setuptools.find_packages("src"),
    python_requires=">=3.8",
    install_requires=[
        "appdirs",
        "click",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "urifactory=urifactory.cli.urifactory:main",
        ],
    },
)
