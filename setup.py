"""Setup configuration for Question Bank Curator package."""

from setuptools import setup

setup(
    name="question-bank-curator",
    version="1.0.0",
    description="Taxonomy-driven browsing, selection and PDF export for an exam question bank",
    author="",
    author_email="",
    packages=[
        "config",
        "src.catalog",
        "src.backend",
        "scripts",
    ],
    package_data={"config": ["taxonomy.yaml"]},
    python_requires=">=3.11",
    install_requires=[
        "pandas>=2.1.0",
        "httpx>=0.26.0",
        "python-dotenv>=1.0.0",
        "pyyaml>=6.0",
        "tqdm>=4.66.0",
        "tenacity>=8.2.0",
    ],
    extras_require={
        "dev": [
            "pytest>=8.0.0",
            "pytest-cov>=4.1.0",
            "black>=24.1.0",
            "ruff>=0.2.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "qbank=scripts.qbank:main",
        ],
    },
)
