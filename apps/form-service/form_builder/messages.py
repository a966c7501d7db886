from typing import Callable, Dict

Localizer = Callable[[str], str]

CATALOGS: Dict[str, Dict[str, str]] = {
    "en": {
        "Invalid string": "Invalid string",
        "Invalid input": "Invalid input",
        "Invalid boolean": "Invalid boolean",
        "Invalid array": "Invalid array",
        "invalid_option": "Please select one of the available options",
        "error_required_field": "This field is required",
        "first_name": "First Name",
        "last_name": "Last Name",
        "your_name": "Your name",
        "example_name": "John Doe",
        "first_last_name": "First Name, Last Name",
        "split_full_name": "Split full name into first and last name",
    },
}


def get_localizer(locale: str = "en") -> Localizer:
    """Return ``m(key)``; unknown locales use English and unknown keys echo back."""
    catalog = CATALOGS.get(locale) or CATALOGS.get(locale.split("-")[0]) or CATALOGS["en"]

    def m(key: str) -> str:
        return catalog.get(key, key)

    return m
