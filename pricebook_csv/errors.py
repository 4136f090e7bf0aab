"""Exceptions raised while turning a price book export into CSV."""


class ConversionError(Exception):
    """Base class for everything the conversion reports back to the caller."""


class MalformedDocument(ConversionError):
    """The input could not be walked as XML markup."""


class OutOfOrderDocument(MalformedDocument):
    """Elements arrived in an order the row builder cannot use (strict mode only)."""


class UnreadableInput(ConversionError):
    """The raw document could not be obtained from its source."""


class InvalidInputKind(ConversionError):
    """The supplied input is not a price book XML document."""


class ConfigError(Exception):
    pass
