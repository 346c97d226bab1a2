from setuptools import setup, find_packages

setup(
    name='bindata',
    version='0.1.0',
    description='Embed binary files as Go byte slices or strings',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.9',
    install_requires=[
        'PyYAML',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'bindata = bindata.cli:main',
        ],
    }
)
