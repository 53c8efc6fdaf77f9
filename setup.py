from setuptools import setup, find_packages

setup(
    name="client-manager",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "pydantic>=2.0.0",
        "psycopg2-binary>=2.9.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "client-manager=client_manager.cli:main",
        ],
    },
)
