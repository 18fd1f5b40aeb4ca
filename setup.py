import setuptools

with open("README.rst", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="snotes",
    version="2.0.0",
    author="Steve Corbett",
    description="Tagged, dated plain-text notes kept in a directory, with a query engine and templates.",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    url="https://github.com/scorbo2/snotes",
    packages=setuptools.find_packages('src'),
    package_dir={'': 'src'},
    entry_points={
        'console_scripts': [
            'snotes = snotes.cli:main'
        ]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    install_requires=[
        'pyyaml>=5.3.1',
        'shortuuid',
        'terminaltables',
    ],
    extras_require={
        'test': [
            'pytest',
            'pyfakefs',
            'pytest-mock',
            'freezegun',
        ],
    },
    python_requires='>=3.7',
)
