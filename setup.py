from setuptools import find_packages, setup

setup(
    name="cleanorders",
    version="0.1.0",
    packages=find_packages(include=["cleanorders", "cleanorders.*"]),
    python_requires=">=3.9",
    install_requires=[
        "click",
        "sqlalchemy>=1.4",
        "python-dotenv",
        "pandas"
    ],
    extras_require={"dev": ["pytest"]},
    entry_points={
        "console_scripts": ["cleanorders=cleanorders.cli.main:cli"],
    },
)
