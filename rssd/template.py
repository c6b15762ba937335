"""
Command template expansion.

A command template is a shell command line containing ``&``-prefixed
placeholders for feed metadata and ``$NAME`` / ``${NAME}`` environment
references. Expansion replaces the placeholders first, then expands the
environment over the resulting string.

Values are inserted as-is with no shell quoting, and there is no escape
for a literal placeholder. Placeholder replacement is a single pass, so a
feed value that happens to contain a placeholder token is inserted
literally. The environment pass runs over the substituted feed values as
well, so a value containing ``$HOME`` is expanded.
"""

import logging
import os
import re
from collections.abc import Mapping

from rssd.models import FeedDocument

logger = logging.getLogger(__name__)

PLACEHOLDERS = (
    "&title",
    "&desc",
    "&lang",
    "&item_title",
    "&item_link",
    "&item_pubDate",
    "&item_desc",
    "&item_authorName",
    "&item_authorEmail",
)

# Longest first, so no token can shadow a longer one sharing its prefix
_PLACEHOLDER_PATTERN = re.compile(
    "|".join(re.escape(token) for token in sorted(PLACEHOLDERS, key=len, reverse=True))
)

# Matches ${NAME} (anything up to the closing brace is the name) or $NAME
_ENV_PATTERN = re.compile(r"\$(?:\{([^}]+)\}|([A-Za-z_][A-Za-z0-9_]*))")


def placeholder_values(doc: FeedDocument) -> list[tuple[str, str]]:
    """
    Build the ordered (token, value) pairs for a feed document.

    The ``&item_*`` tokens take their values from the newest entry.
    """
    item = doc.newest
    return [
        ("&title", doc.title),
        ("&desc", doc.description),
        ("&lang", doc.language),
        ("&item_title", item.title),
        ("&item_link", item.link),
        ("&item_pubDate", item.published),
        ("&item_desc", item.description),
        ("&item_authorName", item.author_name),
        ("&item_authorEmail", item.author_email),
    ]


def substitute_placeholders(template: str, doc: FeedDocument) -> str:
    """
    Replace every placeholder token in the template with feed metadata.

    Parameters
    ----------
    template : str
        The command template.
    doc : FeedDocument
        Feed providing the values. Must have at least one entry.

    Returns
    -------
    str
        The template with placeholders replaced.
    """
    values = dict(placeholder_values(doc))
    return _PLACEHOLDER_PATTERN.sub(lambda match: values[match.group(0)], template)


def expand_environment(text: str, environ: Mapping[str, str] | None = None) -> str:
    """
    Expand environment variable references.

    Supports $VAR and ${VAR}. Inside braces everything up to the closing
    brace is the name, so ${VAR:-x} looks up a variable literally named
    "VAR:-x". Unset variables expand to the empty string. A ``$`` not
    followed by a variable name is kept.

    Parameters
    ----------
    text : str
        The text to process.
    environ : Mapping[str, str] | None
        Environment to read from. Defaults to ``os.environ``.

    Returns
    -------
    str
        The text with environment variables substituted.
    """
    if environ is None:
        environ = os.environ

    def replacer(match: re.Match) -> str:
        var_name = match.group(1) or match.group(2)
        env_value = environ.get(var_name)
        if env_value is not None:
            return env_value
        logger.debug("Environment variable '%s' not set, expanding to empty string", var_name)
        return ""

    return _ENV_PATTERN.sub(replacer, text)


def expand(template: str, doc: FeedDocument, environ: Mapping[str, str] | None = None) -> str:
    """Expand placeholders, then environment variables, into a command line."""
    return expand_environment(substitute_placeholders(template, doc), environ)


class TemplateExpander:
    """
    Expands command templates against feed documents.

    Holds the environment used for ``$NAME`` expansion; by default the
    live process environment is read on every expansion.
    """

    def __init__(self, environ: Mapping[str, str] | None = None):
        self.environ = environ

    def expand(self, template: str, doc: FeedDocument) -> str:
        command = expand(template, doc, self.environ)
        logger.debug("Expanded command template to: %s", command)
        return command
