from setuptools import setup, find_packages

setup(
    name="directive-validator",
    version="0.1.0",
    description="Record field validation driven by declarative directives",
    author="directive-validator contributors",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        'directive_validator': ['local-config.yaml', 'directives.yaml'],
    },
    include_package_data=True,
    install_requires=[
        'pyyaml>=6.0',
        'jsonschema>=4.17.0',
        'requests>=2.28.0',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    python_requires='>=3.9',
)
