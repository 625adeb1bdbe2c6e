from .format import AddressFormatter
from .config import load_configuration
from .model import Configuration, ConfigurationError, Template, Replacement, ComponentDefinition
