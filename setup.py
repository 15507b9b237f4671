"""
Setup script for the hexgrid layout builder.

To install for development:
    pip install -e .[test]

To run the tests:
    pytest tests/
"""

from setuptools import setup

# Setup configuration
setup(
    name='hexgrid_layout',
    version='1.0.0',
    description='Hexagonal binning layouts with coverage-corrected point counts',
    author='Hexgrid Team',
    packages=['hexgrid_python'],
    py_modules=['layout_builder'],
    install_requires=[
        'numpy>=1.20.0',
        'pandas>=1.3.0',
        'matplotlib>=3.4.0',
        'psutil>=5.8.0',
    ],
    extras_require={
        'test': ['pytest>=7.0.0'],
    },
    python_requires='>=3.7',
    zip_safe=False,
)
