from setuptools import find_packages, setup  # type: ignore[import-unresolved]

setup(
    name="itipcheck",
    version="0.1.0",
    packages=find_packages(include=["itipcheck", "itipcheck.*"]),
    python_requires=">=3.8",
    install_requires=[
        "structlog>=23.1.0",
        "pydantic>=2.0",
        "icalendar>=5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-cov",
        ],
    },
    description="Structural validation of iTIP scheduling messages",
)
