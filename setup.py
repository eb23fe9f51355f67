from setuptools import setup, find_packages

setup(
    name="lspresso-shot",
    version="0.1.0",
    description="Black-box language server tests driven through headless Neovim",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"lspresso_shot.driver": ["lua/*.lua"]},
    python_requires=">=3.11",
    install_requires=[
        "click>=8.0",
        "pydantic>=2.0",
        "tomli>=2.0",
        "tomli-w>=1.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "lspresso-shot=lspresso_shot.cli:cli",
        ],
    },
)
