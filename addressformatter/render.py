import re
from typing import Dict, Callable

import pystache

from .model import Template

MINIMAL_COMPONENTS = ('road', 'postcode')
MINIMAL_THRESHOLD = 2

TRIPLE_TAG = re.compile(r'\{\{\{[^}]*\}\}\}')
ORPHANED_TAG = re.compile(r'\{\{[^}]*\}\}')


def remove_tags(text:str) -> str:
    return ORPHANED_TAG.sub('', TRIPLE_TAG.sub('', text))


def is_minimal(components:Dict[str, str]) -> bool:
    missing = sum(1 for c in MINIMAL_COMPONENTS if c not in components)
    return missing < MINIMAL_THRESHOLD


def select_template(components:Dict[str, str], template:Template, default:Template) -> str:
    """
    Choose the template text to render

    Incomplete addresses (neither road nor postcode) use the fallback
    template of the country, or the default fallback if the country has none.
    Countries without an address template use the default fallback as well.

    :param components: normalized components
    :param template: active template for the country
    :param default: the ``default`` template of the configuration
    :returns: template text with unix line endings
    """
    text = template.address_template or default.fallback_template or default.address_template

    if not is_minimal(components):
        if template.fallback_template is not None:
            text = template.fallback_template
        elif default.fallback_template is not None:
            text = default.fallback_template

    return text.replace('\r\n', '\n')


class TemplateRenderer():
    """
    Mustache renderer for address templates

    Values are inserted verbatim for both ``{{name}}`` and ``{{{name}}}``,
    ``{{#first}} a || b {{/first}}`` renders the first non-empty alternative.
    """

    def __init__(self):
        self.renderer = pystache.Renderer(escape=lambda u: u, missing_tags='ignore')
        self.parsed_cache = {}

    def parse(self, text:str):
        parsed = self.parsed_cache.get(text, None)
        if parsed is None:
            parsed = pystache.parse(text)
            self.parsed_cache[text] = parsed
        return parsed

    def first(self, components:Dict[str, str]) -> Callable[[str], str]:
        def _first(content):
            tokens = [token.strip() for token in content.split('||')]
            for t in tokens:
                # pystache renders the returned text again, it must not carry tags
                result = remove_tags(self.renderer.render(self.parse(t), components)).strip()
                if result != '':
                    return result
            return ''
        return _first

    def render(self, components:Dict[str, str], text:str) -> str:
        """
        Render template text with address components

        :param components: normalized components
        :param text: template text
        :returns: rendered, not yet cleaned address
        """
        rendered = self.renderer.render(self.parse(text), components, {'first': self.first(components)})

        # values may carry stray tags
        return remove_tags(rendered)
