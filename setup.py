from setuptools import setup, find_packages
import os.path

# Get the long description from the relevant file
__here__ = os.path.dirname(os.path.realpath(__file__))
with open(os.path.join(__here__, 'README.rst'), 'r') as f:
    long_description = f.read()

setup(
    name='taxlots',
    version='0.0.1dev',

    description='Match sales to tax lots and estimate tax on realized gains',
    long_description=long_description,

    license='MIT',

    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Intended Audience :: Financial and Insurance Industry',
        'Topic :: Software Development :: Libraries :: Python Modules',
        'Topic :: Utilities',
        'Topic :: Office/Business',
        'Topic :: Office/Business :: Financial',
        'Topic :: Office/Business :: Financial :: Accounting',
        'Topic :: Office/Business :: Financial :: Investment',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Natural Language :: English',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],

    keywords=['tax', 'investment', 'cost basis', 'capital gains', 'fifo', 'lifo'],

    packages=find_packages(exclude=['tests', 'tests.*']),

    python_requires='>=3.8',

    install_requires=[
        'tablib >= 1.0.0',
    ],

    extras_require={
        'test': ['pytest'],
    },

    entry_points={
        'console_scripts': [
            'taxlots=taxlots.script:main',
        ],
    },
)
