from setuptools import setup, find_packages

setup(
    name="tasklane",
    version="0.1.0",
    description="Declarative CLI framework with typed parsing and live task trees.",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="Roland Thomas Jr",
    author_email="roland@rtj.dev",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "rich",
        "prompt_toolkit",
        "pydantic>=2",
        "python-dateutil",
        "python-json-logger>=3",
        "pyyaml",
        "toml",
    ],
    extras_require={
        "test": ["pytest", "pytest-asyncio"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Development Status :: 3 - Alpha",
    ],
)
