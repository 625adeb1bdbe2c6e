from typing import Dict, List, Any, Optional, Union

from .clean import clean, apply_postformat
from .config import load_configuration
from .model import Configuration
from .normalize import normalize, ensure_valid, sanitize, find_unknown_components, ATTENTION
from .render import TemplateRenderer, select_template


class AddressFormatter():

    def __init__(self, config:Optional[Union[Configuration, str]]=None):
        """
        Initialize a new address formatter

        :param config: a ``Configuration`` instance or the path of a configuration
                       directory, by default uses the ``ADDRESS_FORMATTER_CONFIG``
                       environment variable or the datafiles included in the bundle
        """
        if not isinstance(config, Configuration):
            config = load_configuration(config)
        self.config = config
        self.renderer = TemplateRenderer()

    def format_address(self, components:Dict[str, Any], country_code:Optional[str]=None) -> str:
        """
        Format address components according to the customs of their country

        :param components: address components, e.g. ``road``, ``house_number``,
                           ``postcode``, ``city``, ``country_code``
        :param country_code: optional, overrides the ``country_code`` component
        :returns: formatted address, may contain linebreaks
        """
        if country_code is not None:
            components = dict(components, country_code=country_code)

        components, template = normalize(components, self.config)
        text = select_template(components, template, self.config.default)
        rendered = clean(self.renderer.render(components, text))

        return clean(apply_postformat(rendered, template))

    def guess_name(self, components:Dict[str, Any]) -> Optional[str]:
        """
        Guess the name of a venue from components the formatter does not know

        :param components: address components
        :returns: the synthesized attention line or ``None``
        """
        components, _ = normalize(components, self.config)
        return components.get(ATTENTION, None)

    def guess_type_candidates(self, components:Dict[str, Any]) -> List[str]:
        """
        List the component keys that are neither components nor aliases,
        these are likely to name the type of the addressed object.

        :param components: address components
        :returns: list of unknown component keys, in input order
        """
        components = ensure_valid(components)
        sanitize(components, self.config)
        return find_unknown_components(components, self.config)
