"""Template rendering utilities."""

import logging
from typing import Any, Dict
from jinja2 import Environment, BaseLoader, StrictUndefined, TemplateError


logger = logging.getLogger(__name__)


class StringTemplateLoader(BaseLoader):
    """Template loader for string templates."""
    
    def __init__(self, template_string: str):
        self.template_string = template_string
        
    def get_source(self, environment, template):
        return self.template_string, None, lambda: True


def _newline_sequence(text: str) -> str:
    """Line ending used by the text, so rendering keeps it."""
    if "\r\n" in text:
        return "\r\n"
    if "\r" in text:
        return "\r"
    return "\n"


def _placeholder_environment(template_str: str) -> Environment:
    """Environment understanding ``${...}`` placeholders and nothing else."""
    return Environment(
        loader=StringTemplateLoader(template_str),
        variable_start_string="${",
        variable_end_string="}",
        block_start_string="${%",
        block_end_string="%}",
        comment_start_string="${#",
        comment_end_string="#}",
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        newline_sequence=_newline_sequence(template_str),
        autoescape=False,
    )


def expand_placeholders(template_str: str, **context: Any) -> str:
    """Expand ``${name.attr}`` placeholders in a string.

    Unknown placeholders raise ``jinja2.UndefinedError``.
    """
    if "${" not in template_str:
        return template_str
    
    try:
        env = _placeholder_environment(template_str)
        template = env.get_template("")
        return template.render(**context)
        
    except TemplateError as e:
        logger.error(f"Placeholder expansion error: {e}")
        raise


def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two dictionaries."""
    result = dict(base)
    
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value
            
    return result
