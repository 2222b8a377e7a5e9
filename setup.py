from setuptools import setup, find_packages

setup(
    name="edgeflow",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src", exclude=["tests", "tests.*"]),
    install_requires=[
        "pydantic>=2",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        "console_scripts": [
            "edgeflow=edgeflow.cli:main",
        ],
    },
    python_requires=">=3.9",
    description="output-routed workflow graph execution with concurrent fan-out",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
)
