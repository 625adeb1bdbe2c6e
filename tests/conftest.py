import pytest

from addressformatter import AddressFormatter, Configuration
from addressformatter.config import load_configuration


DEFAULT_TEMPLATE = '''{{{attention}}}
{{{house}}}
{{{road}}} {{{house_number}}}
{{{postcode}}} {{#first}} {{{city}}} || {{{town}}} || {{{village}}} {{/first}}
{{{country}}}
'''

DEFAULT_FALLBACK = '''{{{attention}}}
{{#first}} {{{city}}} || {{{town}}} {{/first}}
{{{state}}}
{{{country}}}
'''

US_TEMPLATE = '''{{{attention}}}
{{{house_number}}} {{{road}}}
{{{city}}}, {{#first}} {{{state_code}}} || {{{state}}} {{/first}} {{{postcode}}}
{{{country}}}
'''

TEMPLATES = {
    'default': {
        'address_template': DEFAULT_TEMPLATE,
        'fallback_template': DEFAULT_FALLBACK,
    },
    'DE': {
        'address_template': DEFAULT_TEMPLATE,
        'replace': [
            ['^Stadtteil ', ''],
            ['city=Alt-Berlin', 'Berlin'],
        ],
    },
    'US': {
        'address_template': US_TEMPLATE,
        'postformat_replace': [
            ['\nUSA$', '\nUnited States of America'],
        ],
    },
    'XA': {
        'use_country': 'US',
        'change_country': '$state, Testland',
        'add_component': 'state_district=Outer',
    },
    'XB': {
        'use_country': 'US',
        'change_country': '$county Land',
    },
}

COMPONENTS = [
    ('attention', []),
    ('house', ['building']),
    ('house_number', ['street_number']),
    ('road', ['street', 'footway']),
    ('neighbourhood', []),
    ('city', ['town', 'village']),
    ('district', []),
    ('state_district', []),
    ('county', []),
    ('county_code', []),
    ('state', ['province']),
    ('state_code', []),
    ('postcode', ['postal_code']),
    ('country', []),
    ('country_code', []),
]

STATE_CODES = {
    'US': {
        'DC': 'District of Columbia',
        'NY': 'New York',
        'TX': 'Texas',
    },
    'CA': {
        'ON': 'Ontario',
        'QC': {'default': 'Quebec', 'alt_fr': 'Québec'},
    },
    'XC': {
        'AA': 'Shared',
        'BB': 'Shared',
    },
}

COUNTY_CODES = {
    'IT': {
        'MI': {'default': 'Milano', 'alt_en': 'Milan'},
    },
}


@pytest.fixture
def config():
    return Configuration(TEMPLATES, COMPONENTS, state_codes=STATE_CODES, county_codes=COUNTY_CODES)


@pytest.fixture
def formatter(config):
    return AddressFormatter(config)


@pytest.fixture(scope='session')
def bundled_config():
    return load_configuration()


@pytest.fixture(scope='session')
def bundled_formatter(bundled_config):
    return AddressFormatter(bundled_config)


@pytest.fixture
def tour_eiffel():
    return {
        'viewpoint': 'Tour Eiffel 3e étage',
        'road': 'Avenue Gustave Eiffel',
        'suburb': 'Gros-Caillou',
        'city_district': '7th Arrondissement',
        'city': 'Paris',
        'county': 'Paris',
        'state': 'Ile-de-France',
        'country': 'France',
        'postcode': '75007',
        'country_code': 'fr',
    }
