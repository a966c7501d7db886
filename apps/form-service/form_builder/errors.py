class FieldConfigurationError(ValueError):
    """The field schema itself is malformed; never reported as a response issue."""


class ResponseShapeError(ValueError):
    """A response value matches none of the accepted response shapes."""


class WebexApiError(RuntimeError):
    pass
