class LinkShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:linkshortener_error'


class ConfigurationError(LinkShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


class ValidationError(LinkShortenerError):
    """Base exception for user input rejected before any persistence."""

    error_code = 'validation:validation_error'


class EmptyInputError(ValidationError):
    """Raised when a URL or shortcode is empty or whitespace-only."""

    error_code = 'validation:empty_input'


class MalformedUrlError(ValidationError):
    """Raised when a URL cannot be parsed."""

    error_code = 'validation:malformed_url'


class InvalidHostnameError(ValidationError):
    """Raised when a URL has no hostname."""

    error_code = 'validation:invalid_hostname'


class LocalhostNotAllowedError(ValidationError):
    """Raised when a URL points to the local machine."""

    error_code = 'validation:localhost_not_allowed'


class InvalidDomainFormatError(ValidationError):
    """Raised when a hostname has no dot-separated domain."""

    error_code = 'validation:invalid_domain_format'


class InvalidLengthError(ValidationError):
    """Raised when a custom shortcode is too short or too long."""

    error_code = 'validation:invalid_length'


class InvalidCharactersError(ValidationError):
    """Raised when a custom shortcode has non-alphanumeric characters."""

    error_code = 'validation:invalid_characters'


class ReservedWordError(ValidationError):
    """Raised when a custom shortcode is a reserved route name."""

    error_code = 'validation:reserved_word'


class ShortcodeInUseError(ValidationError):
    """Raised when a custom shortcode is already taken (stored or in the same batch)."""

    error_code = 'validation:shortcode_in_use'


class InvalidValidityPeriodError(ValidationError):
    """Raised when the validity period is outside the allowed range."""

    error_code = 'validation:invalid_validity_period'


class InvalidBatchSizeError(ValidationError):
    """Raised when a creation batch is empty or too large."""

    error_code = 'validation:invalid_batch_size'


class BatchValidationError(LinkShortenerError):
    """Raised when one or more entries of a creation batch fail validation.

    Attributes:
        errors (dict[int, ValidationError]):
            Maps the zero-based batch position to the first error found for it.
    """

    error_code = 'validation:batch_rejected'

    def __init__(self, errors: dict[int, ValidationError]):
        self.errors = dict(sorted(errors.items()))
        details = '; '.join(f'#{index + 1}: {error}' for index, error in self.errors.items())
        super().__init__(f'{len(self.errors)} of the requested links failed validation ({details}).')
