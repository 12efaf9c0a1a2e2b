"""
Tests for workflow template rendering.
"""

from workflows.rendering import SAMPLE_VARIABLES, placeholders, render_email, render_template


class TestRenderTemplate:
    """Placeholder substitution"""

    def test_replaces_known_placeholders(self, ana):
        assert render_template('Welcome {{first_name}} {{last_name}}!', ana) == 'Welcome Ana Lee!'

    def test_repeated_placeholder_replaced_everywhere(self):
        result = render_template('{{first_name}}, {{first_name}}, {{first_name}}', {'first_name': 'Ana'})
        assert result == 'Ana, Ana, Ana'

    def test_unknown_placeholder_left_verbatim(self):
        result = render_template('Hi {{first_name}}, your {{favourite_boat}} is ready', {'first_name': 'Ana'})
        assert result == 'Hi Ana, your {{favourite_boat}} is ready'

    def test_missing_value_left_verbatim(self):
        assert render_template('Type: {{membership_type}}', {}) == 'Type: {{membership_type}}'

    def test_none_value_treated_as_missing(self):
        assert render_template('Type: {{membership_type}}', {'membership_type': None}) == 'Type: {{membership_type}}'

    def test_whitespace_inside_braces_not_recognized(self):
        result = render_template('Hi {{ first_name }} / {{first_name}}', {'first_name': 'Ana'})
        assert result == 'Hi {{ first_name }} / Ana'

    def test_rendering_is_idempotent(self, ana):
        template = 'Dear {{first_name}}, {{unknown}} stays. Type {{membership_type}}'
        once = render_template(template, ana)
        assert render_template(once, ana) == once

    def test_values_not_rescanned(self):
        result = render_template('{{first_name}}', {'first_name': '{{last_name}}', 'last_name': 'Lee'})
        assert result == '{{last_name}}'

    def test_non_string_values_are_stringified(self):
        assert render_template('Year {{year}}', {'year': 2025}) == 'Year 2025'

    def test_empty_template(self, ana):
        assert render_template('', ana) == ''
        assert render_template(None, ana) == ''


class TestRenderEmail:
    def test_subject_and_body_rendered_independently(self, ana):
        subject, body = render_email('New signup: {{first_name}}', '<p>{{email}}</p>', ana)
        assert subject == 'New signup: Ana'
        assert body == '<p>ana@example.com</p>'

    def test_sample_variables(self):
        assert SAMPLE_VARIABLES == {
            'first_name': 'John',
            'last_name': 'Doe',
            'email': 'john.doe@example.com',
            'membership_type': 'Adult',
        }


def test_placeholders_in_order_of_first_use():
    assert placeholders('{{last_name}} {{first_name}} {{last_name}} {{ email }}') == ['last_name', 'first_name']
