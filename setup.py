from setuptools import setup, find_packages

setup(
    name="subresolve",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "dnspython>=2.4",
        "tqdm>=4.59",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "subresolve = subresolve.cli:main",
        ],
    },
    author="exfil0",
    description="Concurrent word-list subdomain resolver with JSON reporting",
    license="MIT",
    keywords="subdomain enumeration dns recon security",
    python_requires=">=3.8",
)
