import logging
import re
from typing import Dict, List, Tuple, Any, Optional, Mapping

from .model import Configuration, Template

logger = logging.getLogger(__name__)

ATTENTION = 'attention'
CITY = 'city'
COUNTRY = 'country'
COUNTRY_CODE = 'country_code'
COUNTY = 'county'
COUNTY_CODE = 'county_code'
DISTRICT = 'district'
NEIGHBOURHOOD = 'neighbourhood'
POSTCODE = 'postcode'
STATE = 'state'
STATE_CODE = 'state_code'
STATE_DISTRICT = 'state_district'

# countries without an administrative level between state and city
SMALL_DISTRICTS = frozenset(['BR', 'CR', 'ES', 'NI', 'PY', 'RO', 'TG', 'TM', 'XK'])

COUNTRY_CODE_PATTERN = re.compile(r'[A-Za-z]{2}')
VARIABLE_PATTERN = re.compile(r'.*\$(\w*)')
POSTCODE_LIST_PATTERN = re.compile(r'\d+;\d+')
INTEGER_PATTERN = re.compile(r'[+-]?[0-9]+')
POSTCODE_RANGE_PATTERN = re.compile(r'^(\d{5}),\d{5}')
UNITED_STATES_PATTERN = re.compile(r'^united states', re.IGNORECASE)
WASHINGTON_DC_PATTERN = re.compile(r'washington,? d\.?c\.?', re.IGNORECASE)


def ensure_valid(components:Mapping[str, Any]) -> Dict[str, str]:
    """Copy the input, dropping ``None`` values and coercing the rest to text"""
    return {str(key): str(value) for key, value in components.items() if value is not None}


def resolve_country_code(components:Dict[str, str], config:Configuration) -> Optional[str]:
    """
    Determine the effective country code, apply country redirects and
    territory overrides.

    :returns: upper-cased two letter country code or ``None``
    """
    if COUNTRY_CODE not in components:
        return None
    cc = components[COUNTRY_CODE]
    if not COUNTRY_CODE_PATTERN.fullmatch(cc):
        return None
    cc = cc.upper()
    if cc == 'UK':
        return 'GB'

    redirect = config.templates[cc].redirect if cc in config.templates else None
    if redirect is not None:
        logger.debug('Country code %s redirected to %s', cc, redirect.use_country)
        cc = redirect.use_country
        if redirect.change_country is not None:
            components[COUNTRY] = substitute_component(redirect.change_country, components)
        if redirect.add_component is not None and '=' in redirect.add_component:
            key, value = redirect.add_component.split('=', 1)
            components[key] = value

    if STATE in components:
        for territory in config.territories_of(cc):
            if territory.matches(components[STATE]):
                logger.debug('State %s of %s resolved to territory %s', components[STATE], cc, territory.territory_code)
                cc = territory.territory_code
                components[COUNTRY] = territory.country
                break

    return cc


def substitute_component(value:str, components:Dict[str, str]) -> str:
    match = VARIABLE_PATTERN.match(value)
    if match is None:
        return value
    name = match.group(1)
    return value.replace('$' + name, components.get(name, '')).strip()


def reclassify_district(components:Dict[str, str], country_code:Optional[str]):
    if DISTRICT not in components:
        return
    target = NEIGHBOURHOOD if country_code in SMALL_DISTRICTS else STATE_DISTRICT
    if target not in components:
        components[target] = components.pop(DISTRICT)


def fill_aliases(components:Dict[str, str], config:Configuration):
    for component in config.components:
        if component.name in components:
            continue
        for alias in component.aliases:
            if alias in components:
                components[component.name] = components[alias]
                break


def sanity_cleaning(components:Dict[str, str]):
    postcode = components.get(POSTCODE, None)
    if postcode is not None:
        if len(postcode) > 20 or POSTCODE_LIST_PATTERN.fullmatch(postcode):
            logger.debug('Dropping invalid postcode %r', postcode)
            del components[POSTCODE]
        else:
            match = POSTCODE_RANGE_PATTERN.match(postcode)
            if match is not None:
                components[POSTCODE] = match.group(1)

    for key, value in list(components.items()):
        if 'http://' in value or 'https://' in value:
            logger.debug('Dropping URL in component %s', key)
            del components[key]


def fix_country(components:Dict[str, str]):
    """Repair geocoder results with swapped country and state, US state quirks"""
    if COUNTRY in components and STATE in components:
        if INTEGER_PATTERN.fullmatch(components[COUNTRY]):
            components[COUNTRY] = components.pop(STATE)

    if components.get(COUNTRY_CODE, None) == 'US' and STATE in components:
        components[STATE] = UNITED_STATES_PATTERN.sub('US', components[STATE])
        if WASHINGTON_DC_PATTERN.fullmatch(components[STATE]):
            components[STATE_CODE] = 'DC'
            components[STATE] = 'District of Columbia'
            components[CITY] = 'Washington'


def sanitize(components:Dict[str, str], config:Configuration):
    """Normalization steps that do not depend on the selected template"""
    cc = resolve_country_code(components, config)
    if cc is not None:
        components[COUNTRY_CODE] = cc

    reclassify_district(components, cc)
    fill_aliases(components, config)
    sanity_cleaning(components)
    fix_country(components)


def apply_replacements(components:Dict[str, str], template:Template):
    for component in list(components):
        prefix = component + '='
        for rule in template.replace:
            if rule.search.startswith(prefix):
                if rule.search[len(prefix):] == components[component]:
                    components[component] = rule.replacement
            else:
                components[component] = rule.apply(components[component])


def add_code(components:Dict[str, str], table:Mapping[str, Any], name:str, code:str):
    """
    Derive ``code`` from ``name`` using a code table, the last matching code
    in table order wins.
    """
    if code in components or name not in components or COUNTRY_CODE not in components:
        return

    components[COUNTRY_CODE] = components[COUNTRY_CODE].upper()
    mapping = table.get(components[COUNTRY_CODE], None)
    if mapping is None:
        return

    value = components[name].upper()
    for candidate, names in mapping.items():
        if value in names:
            components[code] = candidate


def find_unknown_components(components:Dict[str, str], config:Configuration) -> List[str]:
    return [key for key in components if not config.is_known(key)]


def configure_attention(components:Dict[str, str], config:Configuration):
    unknown = find_unknown_components(components, config)
    if len(unknown) > 0:
        logger.debug('Unknown components %s moved to attention', ', '.join(unknown))
        components[ATTENTION] = ', '.join(components[key] for key in unknown)


def normalize(components:Mapping[str, Any], config:Configuration) -> Tuple[Dict[str, str], Template]:
    """
    Normalize raw address components and select the template to render them

    :param components: raw components, will not be modified
    :param config: formatter configuration
    :returns: tuple of normalized components and the active template
    """
    components = ensure_valid(components)
    sanitize(components, config)
    template = config.template(components.get(COUNTRY_CODE, None))

    apply_replacements(components, template)
    add_code(components, config.state_codes, STATE, STATE_CODE)
    add_code(components, config.county_codes, COUNTY, COUNTY_CODE)
    configure_attention(components, config)

    return components, template
