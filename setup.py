import setuptools

with open("readme.md", "r") as fh:
    long_description = fh.read()

with open('requirements.txt') as f:
    requirements = f.read().splitlines()

setuptools.setup(
    name="wifigate",
    version="1.0.0",
    description="Video gating and view analytics for captive-portal WiFi journeys",
    license="MIT License",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=8.0"],
        "postgres": ["psycopg2-binary>=2.9"],
    },
    packages=setuptools.find_packages(exclude=["tests", "tests.*", "tools", "migrations", "migrations.*"]),
    include_package_data=True,
    zip_safe=False,
    long_description=long_description,
    long_description_content_type="text/markdown",
    python_requires='>=3.11',
)
