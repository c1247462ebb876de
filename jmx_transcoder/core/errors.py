from typing import Optional


class TranscoderError(Exception):
    """Base class for failures raised by the JMX transcoder core."""


class JMXParseError(TranscoderError):
    """The input is not well-formed markup, or not a JMeter test plan at all."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.line = line
        self.column = column


class UnsupportedElementError(TranscoderError):
    """An element whose kind has no codec was handed to the serializer."""

    def __init__(self, element_type: str):
        super().__init__(f"No codec registered for element type: {element_type}")
        self.element_type = element_type


class ElementNotFoundError(TranscoderError, KeyError):
    """No element with the requested identity exists in the tree."""

    def __init__(self, element_id: str):
        super().__init__(f"Element not found: {element_id}")
        self.element_id = element_id

    def __str__(self) -> str:
        return self.args[0]
