class UrlRegistryError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:url_registry_error'


class ValidationError(UrlRegistryError):
    """Base exception for rejected caller input."""

    error_code = 'validation:validation_error'


class InvalidURLError(ValidationError):
    """Raised when the original URL is not a valid absolute URL."""

    error_code = 'validation:invalid_url'


class InvalidShortcodeError(ValidationError):
    """Raised when a custom shortcode is not 3-10 alphanumeric characters."""

    error_code = 'validation:invalid_shortcode'


class ShortcodeTakenError(ValidationError):
    """Raised when a custom shortcode is already used by any record, expired or not."""

    error_code = 'validation:shortcode_taken'


class InvalidValidityError(ValidationError):
    """Raised when the validity period is outside the accepted range of minutes."""

    error_code = 'validation:invalid_validity'


class PersistenceFailureError(UrlRegistryError):
    """Raised when the durable store rejected a save and the in-memory change was rolled back."""

    error_code = 'store:persistence_failure'


class GenerationExhaustedError(UrlRegistryError):
    """Raised when no unused shortcode was generated within the attempt limit."""

    error_code = 'app:generation_exhausted'


class ConfigurationError(UrlRegistryError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
