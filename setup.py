# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="treedocs",
    version="0.1.0",
    description="Builds markdown, PDF and docsify documentation from a folder tree of markdown and PlantUML sources",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["treedocs*"]),
    package_data={"treedocs": ["resources/*.j2", "resources/*.css"]},
    python_requires=">=3.9",
    install_requires=[
        "requests",  # PlantUML server rasterizer
        "jinja2",  # Website shell template
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'treedocs=treedocs.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
