from setuptools import setup, find_packages

setup(
    name="llmkit",  # Package name
    version="0.1.0",  # Version number
    author="Guotai Shen",
    author_email="sgt1796@gmail.com",
    description="Retrying, multi-provider LLM client with side-by-side provider comparison.",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    url="https://github.com/sgt1796/llmkit",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "requests",
        "python-dotenv",
        "pydantic>=2",
        "loguru",
    ],
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)
