# setup.py
from setuptools import setup, find_packages

setup(
    name="tsumeball",
    version="0.1.0",
    author="Your Name",
    description="A 9x9 half-court basketball puzzle: rules engine, Gymnasium environment and game backend.",
    packages=find_packages(include=["tsumeball", "tsumeball.*"]),
    install_requires=[
        "gymnasium>=0.29.1",
        "numpy>=1.24",
        "matplotlib",
        "pillow",
        "imageio",
        "tqdm",
        "fastapi",
        "pydantic>=2",
        "httpx",
        "uvicorn",
        "pytest",
        "black",
        "isort"
    ],
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.10',
)
