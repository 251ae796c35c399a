from rest_framework.exceptions import ValidationError


class TemplateHandlerError(ValidationError):
    """Template specific fields failed validation."""

    default_detail = "Invalid template fields."
    default_code = "template_invalid"


class UnknownTemplateHandler(LookupError):
    def __init__(self, key):
        super().__init__(f"No template handler registered for '{key}'")
        self.key = key
