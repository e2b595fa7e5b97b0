from setuptools import setup, find_packages

setup(
    name="devcap",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "gitpython>=3.1.30",
        "pandas>=1.3.5",
        "tqdm>=4.64.0",
    ],
    extras_require={
        'test': [
            "pytest>=7.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'devcap=devcap.main:main',
        ],
    },
    description="Aggregate git commits across local repositories for stand-ups and time tracking",
    keywords="git, commits, standup, time tracking",
    python_requires='>=3.8',
)
