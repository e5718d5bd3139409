"""Custom exceptions for the storefront application."""


class StorefrontError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv


class ValidationError(StorefrontError):
    """Raised when user input is incomplete or malformed. Never reaches the store."""
    def __init__(self, message, status_code=400, payload=None):
        super().__init__(message, status_code, payload)


class MissingRequiredFieldError(ValidationError):
    """Raised when one or more required checkout fields are empty."""
    def __init__(self, fields):
        self.fields = list(fields)
        message = 'Please fill in all required fields: ' + ', '.join(self.fields)
        super().__init__(message, payload={'error': 'missing_required_field', 'fields': self.fields})


class InvalidCouponCode(StorefrontError):
    """Raised when a coupon code is not in the coupon table."""
    def __init__(self, code):
        self.code = code
        super().__init__('Invalid coupon code', 400, {'error': 'invalid_coupon', 'code': code})


class NotFoundError(StorefrontError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)


class IllegalTransitionError(StorefrontError):
    """Raised when an action is not allowed from the current screen."""
    def __init__(self, current, target):
        self.current = current
        self.target = target
        message = f"Cannot move from {current} to {target}"
        super().__init__(message, 409, {'error': 'illegal_transition', 'view': current})


class StoreUnavailableError(StorefrontError):
    """Raised when the catalog store cannot be read."""
    def __init__(self, message="Could not load the catalog from the store"):
        super().__init__(message, 503, {'error': 'store_unavailable'})


class SchemaMissingError(StoreUnavailableError):
    """Raised when the backing tables have not been provisioned."""
    def __init__(self, message="Database tables not found. Run the setup SQL from the admin panel."):
        super().__init__(message)
        self.payload = {'error': 'setup_required'}


class PersistenceError(StorefrontError):
    """Raised when an order or catalog write fails. Never retried automatically."""
    def __init__(self, message="Could not save to the store. Please try again."):
        super().__init__(message, 503, {'error': 'persistence_error'})
