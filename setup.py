from setuptools import setup, find_packages

setup(
    name="bettingai",
    version="1.0.0",
    description="Entertainment sports prediction generator with a Telegram bot and HTTP API",
    author="Andy Cheng",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    package_data={"bettingai": ["webapp/*"]},
    install_requires=[
        "numpy>=1.25.0",
        "Pillow>=10.0.0",
        "fastapi>=0.110.0",
        "uvicorn>=0.29.0",
        "python-multipart>=0.0.9",
        "aiogram>=3.7.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "httpx>=0.27.0",
        ],
    },
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "bettingai=bettingai.cli:main",
        ],
    },
)
