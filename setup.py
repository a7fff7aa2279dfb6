from setuptools import setup, find_packages

setup(
    name="fcprofiler",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "fcprofiler.utils": ["templates/*.j2"],
    },
    entry_points={
        'console_scripts': [
            'fcprofiler=fcprofiler.cli:main',
        ],
    },
    install_requires=[
        "pyelftools>=0.29",
        "Jinja2>=3.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    python_requires=">=3.9",
    author="fcprofiler",
    description="CPU hotspot analysis for flight-controller sampling profiles",
)
