class CsvConversionError(ValueError):
    """Base class for caller errors raised while converting CSV input."""


class EmptyInputError(CsvConversionError):
    pass


class InvalidDelimiterError(CsvConversionError):
    pass


class UnsupportedPlatformError(CsvConversionError):
    pass


class CatalogParseError(CsvConversionError):
    pass
