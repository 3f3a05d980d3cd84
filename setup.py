import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="lnd-credentials",
    version="0.1.0",
    author="Will Clark",
    author_email="will8clark@gmail.com",
    description="Assemble cert, macaroon and socket credentials for LND nodes",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=["tests"]),
    package_data={"lnd_credentials": ["config.ini"]},
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    install_requires=[
        "trio>=0.22.0",
        "pycryptodome>=3.9.0",
        "pymacaroons>=0.13.0",
    ],
    extras_require={"test": ["pytest>=6.0"]},
    entry_points={
        "console_scripts": ["lnd-credentials=lnd_credentials.cli:main"],
    },
    python_requires=">=3.8",
)
