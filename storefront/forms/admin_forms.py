"""
Admin forms for catalog management.

Forms are bound to JSON payloads as well as form posts; CSRF is enforced
app-wide by CSRFProtect, so the per-form token is disabled.
"""
from flask_wtf import FlaskForm
from wtforms import DecimalField, SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, InputRequired, NumberRange, Length, Optional

from storefront.models import OfferingCategory


class PriceUpdateForm(FlaskForm):
    """Both prices of an existing offering."""

    class Meta:
        csrf = False

    original_price = DecimalField(
        'Original price',
        validators=[
            InputRequired(message='Original price is required'),
            NumberRange(min=0, message='Price cannot be negative')
        ],
        places=2
    )

    discount_price = DecimalField(
        'Discount price',
        validators=[
            InputRequired(message='Discount price is required'),
            NumberRange(min=0, message='Price cannot be negative')
        ],
        places=2
    )


class OfferingForm(FlaskForm):
    """New catalog entry. The id is generated on insert."""

    class Meta:
        csrf = False

    name = StringField(
        'Name',
        validators=[DataRequired(message='Name is required'), Length(max=255)]
    )

    category = SelectField(
        'Category',
        choices=[(value, value) for value in OfferingCategory.values()],
        validators=[DataRequired(message='Category is required')]
    )

    icon = StringField('Icon', validators=[Optional(), Length(max=16)])

    original_price = DecimalField(
        'Original price',
        validators=[
            InputRequired(message='Original price is required'),
            NumberRange(min=0, message='Price cannot be negative')
        ],
        places=2
    )

    discount_price = DecimalField(
        'Discount price',
        validators=[
            InputRequired(message='Discount price is required'),
            NumberRange(min=0, message='Price cannot be negative')
        ],
        places=2
    )

    description = TextAreaField('Description', validators=[Optional()])

    search_tags = StringField(
        'Search tags',
        validators=[Optional()],
        render_kw={'placeholder': 'Comma separated, e.g. seo, google'}
    )

    def to_draft(self):
        """Offering draft for catalog_service.create_offering."""
        return {
            'name': self.name.data.strip(),
            'category': self.category.data,
            'icon': (self.icon.data or '').strip(),
            'original_price': self.original_price.data,
            'discount_price': self.discount_price.data,
            'description': (self.description.data or '').strip(),
            'search_tags': [t.strip() for t in (self.search_tags.data or '').split(',') if t.strip()],
        }


def first_errors(form):
    """Field name -> first error message."""
    return {name: errors[0] for name, errors in form.errors.items() if errors}
