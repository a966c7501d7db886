import sys
import unittest
from pathlib import Path

FORM_SERVICE_ROOT = Path(__file__).resolve().parents[1]
if str(FORM_SERVICE_ROOT) not in sys.path:
    sys.path.insert(0, str(FORM_SERVICE_ROOT))

from form_builder.errors import FieldConfigurationError  # noqa: E402
from form_builder.models import FieldSchema  # noqa: E402
from form_builder.variants import (  # noqa: E402
    ensure_variants_configured,
    resolve_sub_field_display,
    resolve_sub_fields,
    resolve_variant,
    with_default_variants_config,
)

NAME_VARIANTS_CONFIG = {
    "variants": {
        "firstAndLastName": {
            "fields": [
                {"name": "firstName", "type": "text", "required": True},
                {"name": "lastName", "type": "text", "label": "Surname"},
            ]
        },
        "fullName": {"fields": [{"name": "fullName", "type": "text", "required": True}]},
    }
}


class VariantResolutionTests(unittest.TestCase):
    def test_field_variant_wins_over_type_default(self):
        field = FieldSchema(name="name", type="name", variant="firstAndLastName")
        self.assertEqual(resolve_variant(field), "firstAndLastName")

    def test_falls_back_to_type_default(self):
        field = FieldSchema(name="name", type="name")
        self.assertEqual(resolve_variant(field), "fullName")

    def test_plain_field_has_no_variant(self):
        field = FieldSchema(name="notes", type="textarea")
        self.assertIsNone(resolve_variant(field))

    def test_resolve_sub_fields_in_order(self):
        field = FieldSchema.model_validate(
            {"name": "name", "type": "name", "variantsConfig": NAME_VARIANTS_CONFIG}
        )
        sub_fields = resolve_sub_fields(field, "firstAndLastName")
        self.assertEqual([sub.name for sub in sub_fields], ["firstName", "lastName"])
        self.assertTrue(sub_fields[0].required)
        self.assertFalse(sub_fields[1].required)

    def test_missing_variants_config_is_configuration_error(self):
        field = FieldSchema(name="name", type="name")
        with self.assertRaises(FieldConfigurationError):
            resolve_sub_fields(field, "fullName")

    def test_unknown_variant_is_configuration_error(self):
        field = FieldSchema.model_validate(
            {"name": "name", "type": "name", "variantsConfig": NAME_VARIANTS_CONFIG}
        )
        with self.assertRaises(FieldConfigurationError):
            resolve_sub_fields(field, "initials")

    def test_display_uses_type_defaults_when_label_missing(self):
        field = FieldSchema.model_validate(
            {"name": "name", "type": "name", "variantsConfig": NAME_VARIANTS_CONFIG}
        )
        first, last = resolve_sub_field_display(field, "firstAndLastName")
        self.assertEqual(first.label, "first_name")
        self.assertFalse(first.can_change_requirability)
        self.assertEqual(last.label, "Surname")
        self.assertTrue(last.can_change_requirability)

        (full,) = resolve_sub_field_display(field, "fullName")
        self.assertEqual(full.placeholder, "example_name")

    def test_seeds_variants_config_from_type_default(self):
        field = FieldSchema(name="name", type="name")
        seeded = with_default_variants_config(field)
        self.assertIsNone(field.variants_config)
        self.assertEqual(
            sorted(seeded.variants_config.variants), ["firstAndLastName", "fullName"]
        )
        self.assertEqual(resolve_sub_fields(seeded, "fullName")[0].name, "fullName")

    def test_existing_variants_config_is_kept(self):
        field = FieldSchema.model_validate(
            {"name": "name", "type": "name", "variantsConfig": NAME_VARIANTS_CONFIG}
        )
        self.assertIs(with_default_variants_config(field), field)
        plain = FieldSchema(name="email", type="email")
        self.assertIs(with_default_variants_config(plain), plain)


    def test_ensure_variants_configured(self):
        configured = FieldSchema.model_validate(
            {"name": "name", "type": "name", "variantsConfig": NAME_VARIANTS_CONFIG}
        )
        ensure_variants_configured(configured)
        ensure_variants_configured(FieldSchema(name="email", type="email"))
        with self.assertRaises(FieldConfigurationError):
            ensure_variants_configured(FieldSchema(name="name", type="name"))


class FieldSchemaLabelTests(unittest.TestCase):
    def test_falls_back_to_defaults(self):
        field = FieldSchema.model_validate(
            {
                "name": "notes",
                "type": "textarea",
                "defaultLabel": "additional_notes",
                "defaultPlaceholder": "share_things_to_help_prepare",
            }
        )
        self.assertEqual(field.effective_label, "additional_notes")
        self.assertEqual(field.effective_placeholder, "share_things_to_help_prepare")

    def test_user_values_win(self):
        field = FieldSchema(
            name="notes",
            type="textarea",
            label="Anything else?",
            default_label="additional_notes",
            placeholder="Tell us more",
        )
        self.assertEqual(field.effective_label, "Anything else?")
        self.assertEqual(field.effective_placeholder, "Tell us more")

    def test_no_label_at_all(self):
        field = FieldSchema(name="notes", type="textarea")
        self.assertIsNone(field.effective_label)
        self.assertIsNone(field.effective_placeholder)


if __name__ == "__main__":
    unittest.main()
