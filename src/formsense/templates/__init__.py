"""Template catalog and matching."""

from formsense.templates.matcher import TemplateMatcher
from formsense.templates.pattern_matcher import PatternMatcher
from formsense.templates.registry import TemplateRegistry
from formsense.templates.schema_generator import generate_template
from formsense.templates.store import TemplateStore, load_builtin_templates

__all__ = [
    "PatternMatcher",
    "TemplateMatcher",
    "TemplateRegistry",
    "TemplateStore",
    "generate_template",
    "load_builtin_templates",
]
