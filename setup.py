from setuptools import setup, find_packages

with open("requirements.txt") as f:
    required = f.read().splitlines()

setup(
    name="followfeed",
    version="0.0.1",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=required,
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["followfeed = followfeed.cli:main"]},
    author="jmpaz",
    description="Normalize bilibili followings feeds into canonical feed items",
)
