from setuptools import setup, find_packages
from pathlib import Path

# Read the README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text()

setup(
    name="shapeindex",
    version="0.1.0",
    description="Shape, shapetree and shape index generation for benchmark RDF datasets",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="shapeindex Contributors",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={
        "shapeindex.shex": ["shex.jsonld"],
    },
    install_requires=[
        "rdflib>=6.2.0",
        "PyShExC>=0.9.1",
        "duckdb>=0.9.0",
        "numpy>=1.24.0",
        "tqdm>=4.65.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Database",
        "Topic :: Software Development :: Testing",
    ],
    keywords="rdf shex shapetrees shape-index solid benchmark linked-data",
)
