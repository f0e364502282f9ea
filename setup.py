from setuptools import find_packages, setup

setup(
    name='multisite-aggregator',
    version='1.0.0',
    description='Sync jobs between portal and source sites of a multisite network',
    packages=find_packages(include=['aggregator', 'aggregator.*'], exclude=[
        'aggregator.test',
        'aggregator.test.*',
    ]),
    python_requires='>=3.8',
    install_requires=[
        'python-dateutil',
        'requests',
        'simplejson',
    ],
    extras_require={
        'test': [
            'mock',
            'pytest',
        ],
    },
    entry_points={
        "console_scripts": [
            "aggregator = aggregator.main:main",
        ],
    }
)
