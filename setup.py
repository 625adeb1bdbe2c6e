import os
from setuptools import setup

# allow setup.py to be run from any path
os.chdir(os.path.normpath(os.path.join(os.path.abspath(__file__), os.pardir)))

setup(
        name='addressformatter',
        version='1.0.0',
        description='Format address components according to the postal customs of their country',
        long_description='''
            Python implementation of an address formatter.

            Takes the loosely structured address components a geocoder returns (road, house number,
            postcode, city, state, country, ...) and renders them into a single address string as it
            would be written in the country of the address.

            Formatting is driven by the configuration format of the [OpenCageData address-formatting repository](https://github.com/OpenCageData/address-formatting):
            per country mustache templates, component aliases and state and county code tables. A small
            subset of that configuration is bundled, point the formatter at a checkout of the repository
            to get all countries.
        ''',
        long_description_content_type='text/markdown',
        include_package_data=True,
        classifiers=[
            'Development Status :: 5 - Production/Stable',
            'Intended Audience :: Developers',
            'License :: OSI Approved :: BSD License',
            'Programming Language :: Python',
            'Programming Language :: Python :: 3',
            'Operating System :: OS Independent'
        ],
        keywords='address formatting postal opencage geocoding',
        packages=['addressformatter'],
        package_data={
            'addressformatter': [
                'conf/*.yaml',
                'conf/countries/*.yaml'
            ]
        },
        python_requires='>=3.6',
        install_requires=[
            'PyYAML >= 5.1',
            'pystache >= 0.5.4'
        ],
        extras_require={
            'test': [
                'pytest >= 6.0'
            ]
        },
        dependency_links=[
        ]
)
