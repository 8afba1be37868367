from setuptools import setup, find_packages
setup(
    name="nsrl_filter",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=["numpy", "zstandard", "xxhash>=3.0"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["nsrl-filter=nsrl_filter.cli:main"]},
    python_requires=">=3.9",
)
