"""Setup script for the TMS9918A VDP emulator."""

from setuptools import setup, find_packages

setup(
    name="tms9918a-emu",
    version="1.0.0",
    description="Texas Instruments TMS9918A Video Display Processor emulator",
    long_description=open("README.md").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    license="MIT",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.10",
    install_requires=[
        "pygame>=2.5.0",
        "numpy>=1.24.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Emulators",
    ],
)
