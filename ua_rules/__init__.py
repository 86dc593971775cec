from loguru import logger

from .categories import (
    BrowserExtractor,
    CategoryExtractor,
    CPUExtractor,
    DeviceExtractor,
    EngineExtractor,
    OSExtractor,
    RuleSet,
)
from .core import Capture, Extractor, FieldMap, Fixed, Key, Remap, Rewrite, Rule, match
from .loader import RuleError, default_rules, load_rules
from .parser import Parser, parse
from .results import CPU, OS, Browser, Device, Engine, Record

__all__ = [
    "CPU",
    "OS",
    "Browser",
    "BrowserExtractor",
    "CPUExtractor",
    "Capture",
    "CategoryExtractor",
    "Device",
    "DeviceExtractor",
    "Engine",
    "EngineExtractor",
    "Extractor",
    "FieldMap",
    "Fixed",
    "Key",
    "OSExtractor",
    "Parser",
    "Record",
    "Remap",
    "Rewrite",
    "Rule",
    "RuleError",
    "RuleSet",
    "default_rules",
    "load_rules",
    "match",
    "parse",
]

logger.disable(__name__)
