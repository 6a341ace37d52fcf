from setuptools import setup, find_packages

setup(
    name="lantern",
    version="0.1.0",
    description="Finding overlay and log review for captured network traffic",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "click>=8.0.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "lantern=lantern_cli.main:cli",
        ],
    },
    include_package_data=True,
    python_requires=">=3.8",
)
