from setuptools import setup, find_packages

setup(
    name="frameforge",
    version="0.1.0",
    packages=find_packages(include=['frameforge', 'frameforge.*']),
    install_requires=[
        'pandas>=1.5.0',      # Default DataFrame backend, sparse backend
        'numpy>=1.21.0',      # Default Array backend, masked backend
    ],
    extras_require={
        'cli': [
            'pyyaml>=5.4',                      # YAML config file support
        ],
        'dev': [                                # Development tools
            'pytest>=7.0.0',
            'pytest-mock>=3.6.0',
            'pyyaml>=5.4',
        ],
    },
    entry_points={
        'console_scripts': [
            'frameforge=frameforge.cli.main:main',
        ],
    },
    python_requires='>=3.10',
)
