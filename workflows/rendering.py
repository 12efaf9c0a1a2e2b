"""
Template variable substitution for workflow subjects and bodies.

Placeholders are written ``{{name}}`` with no whitespace inside the braces.
``{{ name }}`` is deliberately not recognized and is left as typed, the same as
a placeholder whose name has no value in the mapping, so half-finished drafts
render without errors.
"""

import re
from typing import Dict, Mapping, Tuple

PLACEHOLDER_RE = re.compile(r'\{\{([A-Za-z0-9_]+)\}\}')

# Variables documented to operators in the workflow editor
TEMPLATE_VARIABLES = ('first_name', 'last_name', 'email', 'membership_type')

# Defaults used when an operator sends a test email
SAMPLE_VARIABLES: Dict[str, str] = dict(zip(
    TEMPLATE_VARIABLES,
    ('John', 'Doe', 'john.doe@example.com', 'Adult'),
))


def render_template(template: str, variables: Mapping[str, object]) -> str:
    """Replace every known ``{{name}}`` in ``template`` with its value."""
    if not template:
        return template or ''

    def _substitute(match):
        name = match.group(1)
        if name in variables and variables[name] is not None:
            return str(variables[name])
        return match.group(0)

    return PLACEHOLDER_RE.sub(_substitute, template)


def render_email(subject: str, body: str, variables: Mapping[str, object]) -> Tuple[str, str]:
    return render_template(subject, variables), render_template(body, variables)


def placeholders(template: str):
    """Names of all placeholders used in ``template``, in order of first use"""
    seen = []
    for name in PLACEHOLDER_RE.findall(template or ''):
        if name not in seen:
            seen.append(name)
    return seen
