class SchemaError(ValueError):
    """A required raw or reference column is missing."""


class ReferenceIntegrityError(ValueError):
    """The FIPS reference maps one combined code to more than one county."""
