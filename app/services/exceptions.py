"""
Service Exceptions
Conditions raised by the external-service adapters. Call-level failures are
raised as HTTPException by the services themselves.
"""


class ServiceError(Exception):
    """Base class for adapter failures"""


class DuplicateCertificateError(ServiceError):
    """Insert rejected by the unique constraint on certificate_number"""

    def __init__(self, certificate_number: str):
        self.certificate_number = certificate_number
        super().__init__(f"certificate {certificate_number} already exists")


class RenderError(ServiceError):
    """PDF rendering failed"""


class RenderTimeoutError(RenderError):
    """PDF rendering exceeded PDF_RENDER_TIMEOUT_SECONDS"""


class StorageError(ServiceError):
    """Artifact store rejected an upload or delete"""


class TableParseError(ServiceError):
    """Uploaded file could not be read as a table"""
