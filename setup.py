from setuptools import setup, find_namespace_packages

setup(
    name="search_query_params",
    version="0.1",
    packages=find_namespace_packages(include=["search", "models", "app", "app.*"]),
    install_requires=[
        "pydantic>=2.0",
        "uvicorn",
        "fastapi",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx>=0.27.0",
        ],
    },
    python_requires='>=3.11',
)
