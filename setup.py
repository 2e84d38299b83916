from setuptools import setup


setup(
    name="member-lookup",
    version="0.3.0",
    description="Tolerant parsing, caching and search for member sheets published as CSV",
    packages=["member_lookup"],
    python_requires=">=3.10",
    install_requires=[
        "pandas",
        "chardet",
        "openpyxl",
        "streamlit",
        "requests",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "member-lookup=member_lookup.cli:main",
        ]
    },
)
