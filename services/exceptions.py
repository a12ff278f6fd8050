class BadRequestError(Exception):
    """Raised when a request is missing required data (e.g., no originalSupplier)."""
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class UpstreamFailure(Exception):
    """Raised when talking to the spreadsheet store fails (network, HTTP or JSON)."""
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class UpdateRejected(Exception):
    """Raised when the store answers an update without an acknowledgment."""
    status_code = 400

    def __init__(self, message, body=None):
        super().__init__(message)
        self.message = message
        self.body = body


class MethodNotAllowed(Exception):
    status_code = 405

    def __init__(self, method):
        super().__init__(f"Method not allowed: {method}")
        self.message = "Method not allowed"
        self.method = method


class VendorNotFound(Exception):
    """Raised when a vendor id no longer resolves (e.g., after a reload)."""
    def __init__(self, vendor_id):
        super().__init__(f"Vendor not found: {vendor_id}")
        self.message = f"Vendor not found: {vendor_id}"
        self.vendor_id = vendor_id


class ProxyError(Exception):
    """Raised by the proxy clients on a non-2xx answer or a transport error."""
    def __init__(self, message, status=None, payload=None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload
