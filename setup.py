from pathlib import Path

from setuptools import find_packages, setup


def parse_requirements(filename):
    """Load requirements from a pip requirements file."""
    with (Path(__file__).parent / filename).open('r', encoding='utf-8') as file:
        lines = file.read().splitlines()
    return [line for line in lines if line and not line.startswith("#")]


setup(
    name="rankavl",
    version="0.1.0",
    description="An AVL tree augmented with right weights for logarithmic-time rank queries over a scoreboard.",
    long_description=(Path(__file__).parent / "README.md").read_text(encoding="utf-8"),
    long_description_content_type="text/markdown",
    packages=find_packages(include=["rankavl", "rankavl.*"]),
    install_requires=parse_requirements("requirements.txt"),  # Dynamically read dependencies
    extras_require={"test": ["pytest"]},
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)
