import re
from types import MappingProxyType
from typing import Dict, List, Tuple, Any, Optional, NamedTuple, Mapping, FrozenSet, Iterable


class ConfigurationError(RuntimeError):
    """Raised when the formatter configuration is incomplete or invalid"""


GROUP_REFERENCE = re.compile(r'\$(\d+)')


class Replacement(NamedTuple):
    search: str
    replacement: str
    regex: Any

    @classmethod
    def create(cls, search:str, replacement:str) -> 'Replacement':
        try:
            regex = re.compile(search)
        except re.error as e:
            raise ConfigurationError('Invalid replacement pattern {!r}: {}'.format(search, e))

        # configuration uses `$1` style group references
        return cls(search, GROUP_REFERENCE.sub(r'\\g<\1>', replacement), regex)

    def apply(self, value:str) -> str:
        return self.regex.sub(self.replacement, value)


def parse_replacements(value:Any) -> Tuple[Replacement, ...]:
    """
    Parse a replacement rule list, either a list of ``[from, to]`` pairs or
    a single ``[from, to]`` pair. Everything else results in no rules.
    """
    if not isinstance(value, list) or len(value) == 0:
        return ()
    if isinstance(value[0], list):
        return tuple(Replacement.create(*pair) for pair in value if len(pair) == 2)
    if isinstance(value[0], str) and len(value) == 2:
        return (Replacement.create(value[0], value[1]), )
    return ()


class CountryRedirect(NamedTuple):
    """Treat a country code as if it were ``use_country``"""
    use_country: str
    change_country: Optional[str] = None
    add_component: Optional[str] = None


class TerritoryOverride(NamedTuple):
    """Re-route addresses of ``country_code`` whose state names a territory"""
    country_code: str
    state: str
    territory_code: str
    country: str
    ignore_case: bool = True

    def matches(self, state:str) -> bool:
        if self.ignore_case:
            return state.lower() == self.state.lower()
        return state == self.state


TERRITORY_OVERRIDES = (
    TerritoryOverride('NL', 'Curaçao', 'CW', 'Curaçao', ignore_case=False),
    TerritoryOverride('NL', 'sint maarten', 'SX', 'Sint Maarten'),
    TerritoryOverride('NL', 'Aruba', 'AW', 'Aruba'),
)


class Template(NamedTuple):
    address_template: Optional[str] = None
    fallback_template: Optional[str] = None
    use_country: Optional[str] = None
    change_country: Optional[str] = None
    add_component: Optional[str] = None
    replace: Tuple[Replacement, ...] = ()
    postformat_replace: Tuple[Replacement, ...] = ()

    @classmethod
    def parse(cls, value:Any) -> 'Template':
        """
        Build a template from a parsed configuration entry

        :param value: either the template string itself or a dictionary with
                      ``address_template`` and the optional rule keys
        :returns: Template instance, empty if the entry has an unknown shape
        """
        if isinstance(value, str):
            return cls(address_template=value)
        if not isinstance(value, dict):
            return cls()

        return cls(
            address_template=value.get('address_template', None),
            fallback_template=value.get('fallback_template', None),
            use_country=value.get('use_country', None),
            change_country=value.get('change_country', None),
            add_component=value.get('add_component', None),
            replace=parse_replacements(value.get('replace', None)),
            postformat_replace=parse_replacements(value.get('postformat_replace', None))
        )

    @property
    def redirect(self) -> Optional[CountryRedirect]:
        if self.use_country is None:
            return None
        return CountryRedirect(self.use_country, self.change_country, self.add_component)


class ComponentDefinition(NamedTuple):
    name: str
    aliases: Tuple[str, ...] = ()


def parse_code_table(table:Dict[str, Any]) -> Dict[str, Dict[str, FrozenSet[str]]]:
    """
    Convert a state or county code table to ``country -> code -> names``.

    Names are upper-cased, entries may be a single name, a dictionary of
    name variants or a list of names.
    """
    result = {}
    for country_code, codes in (table or {}).items():
        if not isinstance(codes, dict):
            continue
        processed = {}
        for code, names in codes.items():
            if isinstance(names, str):
                names = [names]
            elif isinstance(names, dict):
                names = names.values()
            elif not isinstance(names, list):
                names = []
            processed[code] = frozenset(n.upper() for n in names if isinstance(n, str))
        result[country_code] = MappingProxyType(processed)
    return result


class Configuration():

    DEFAULT = 'default'

    def __init__(self,
        templates:Mapping[str, Any],
        components:Iterable[Any],
        state_codes:Optional[Dict[str, Any]]=None,
        county_codes:Optional[Dict[str, Any]]=None,
        territories:Iterable[TerritoryOverride]=TERRITORY_OVERRIDES
    ):
        """
        Immutable formatter configuration

        :param templates: country code to template, values may be ``Template``
                          instances or raw parsed configuration entries
        :param components: ordered component definitions, either
                           ``ComponentDefinition`` or ``(name, aliases)`` pairs
        :param state_codes: raw state code table (country -> code -> names)
        :param county_codes: raw county code table (country -> code -> names)
        :param territories: territory overrides checked after the country
                            code is resolved
        """
        parsed = {}
        for key, value in templates.items():
            parsed[key] = value if isinstance(value, Template) else Template.parse(value)

        default = parsed.get(self.DEFAULT, None)
        if default is None:
            raise ConfigurationError("Configuration for address formatter has no default value!")
        if not default.address_template:
            raise ConfigurationError("Default template of address formatter has no address_template!")

        self.templates = MappingProxyType(parsed)
        self.components = tuple(ComponentDefinition(name, tuple(aliases)) for name, aliases in components)

        aliases = {}
        for component in self.components:
            for alias in component.aliases:
                aliases[alias] = component.name
        self.aliases = MappingProxyType(aliases)
        self.canonical = frozenset(c.name for c in self.components)

        self.state_codes = MappingProxyType(parse_code_table(state_codes))
        self.county_codes = MappingProxyType(parse_code_table(county_codes))
        self.territories = tuple(territories)

    @property
    def default(self) -> Template:
        return self.templates[self.DEFAULT]

    def template(self, country_code:Optional[str]) -> Template:
        """Template for a country code, the default template if there is none"""
        return self.templates.get(country_code, self.default)

    def is_known(self, component:str) -> bool:
        return component in self.canonical or component in self.aliases

    def territories_of(self, country_code:str) -> List[TerritoryOverride]:
        return [t for t in self.territories if t.country_code == country_code]
