class StoreNotConfiguredError(RuntimeError):
    """Raised by write paths when the content store has no credentials (demo mode)."""

    def __init__(self, message="Armazenamento de conteúdo não está configurado"):
        super().__init__(message)


class BlobUploadError(ValueError):
    """Raised when an uploaded file is rejected before reaching the blob store."""


class DriveNotAuthorizedError(RuntimeError):
    """Raised when a Google Drive call is made before OAuth is completed."""

    def __init__(self, message="Não autenticado no Google Drive. Configure a autenticação primeiro."):
        super().__init__(message)
